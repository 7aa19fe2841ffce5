from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from rock_scanner.config import DEFAULT_CONFIG_PATH, load_config
from rock_scanner.errors import ImageIOError
from rock_scanner.pipeline import format_outcome, scan_files

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s func=%(funcName)s %(message)s"

logger = logging.getLogger("rock_scanner")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Read rock composition from cockpit HUD screenshots using Tesseract OCR.",
    )
    parser.add_argument(
        "images",
        nargs="*",
        type=Path,
        help="PNG screenshots to scan. Defaults to screenshot-1.png ... screenshot-6.png.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="TOML config file (optional).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging for every OCR box considered.",
    )
    parser.add_argument(
        "--debug-dir",
        type=Path,
        help="Folder to dump the cropped regions sent to OCR.",
    )
    parser.add_argument(
        "--tesseract-cmd",
        help="Full path to the tesseract binary if it is not on PATH.",
    )
    return parser


def setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stdout,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args.config)

    setup_logging(args.debug or config.scanner.debug)
    logger.debug("logger initialized")

    settings = config.ocr
    if args.tesseract_cmd:
        settings = replace(settings, tesseract_cmd=args.tesseract_cmd)
    paths = args.images or list(config.scanner.inputs)
    debug_dir = args.debug_dir or config.scanner.debug_dir

    try:
        for outcome in scan_files(paths, settings, debug_dir=debug_dir):
            print(format_outcome(outcome))
    except ImageIOError as exc:
        logger.error("image load failed error=%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
