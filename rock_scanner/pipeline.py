"""Sequential screenshot processing: locate the label, then read the panel."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

from PIL import Image, UnidentifiedImageError

from rock_scanner.composition import RockComposition, extract_composition
from rock_scanner.config import OcrTesseractConfig
from rock_scanner.errors import ImageIOError, ScannerError
from rock_scanner.scan_results import locate_scan_results

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanOutcome:
    path: Path
    composition: Optional[RockComposition] = None
    error: Optional[ScannerError] = None

    @property
    def ok(self) -> bool:
        return self.composition is not None


def open_picture(path: Path) -> Image.Image:
    logger.info("opening image file filename=%s", path)
    try:
        image = Image.open(path)
        image.load()
    except (OSError, UnidentifiedImageError) as exc:
        raise ImageIOError(f"image open error: {path}: {exc}") from exc
    logger.debug("loaded image format detected format=%s", image.format)
    if image.format != "PNG":
        image.close()
        raise ImageIOError(f"png decode error: {path}: unsupported format {image.format}")
    return image


def scan_picture(
    image: Image.Image,
    settings: OcrTesseractConfig,
    debug_dir: Optional[Path] = None,
    tag: str = "",
) -> RockComposition:
    anchor = locate_scan_results(image, settings, debug_dir=debug_dir, tag=tag)
    logger.debug("scan results box=%s size=%dx%d", anchor, anchor.width, anchor.height)
    return extract_composition(image, anchor, settings, debug_dir=debug_dir, tag=tag)


def scan_files(
    paths: Iterable[Path],
    settings: OcrTesseractConfig,
    debug_dir: Optional[Path] = None,
) -> Iterator[ScanOutcome]:
    """
    Scan each screenshot in order.

    Per-image failures are yielded as outcomes and the loop continues.
    ImageIOError is not caught: an unreadable file stops the run.
    """
    for path in paths:
        path = Path(path)
        image = open_picture(path)
        try:
            composition = scan_picture(image, settings, debug_dir=debug_dir, tag=path.stem)
        except ScannerError as exc:
            logger.error("scan failed filename=%s error=%s", path, exc)
            yield ScanOutcome(path=path, error=exc)
        else:
            logger.info("scan complete filename=%s composition=%s", path, composition)
            yield ScanOutcome(path=path, composition=composition)
        finally:
            image.close()


def format_outcome(outcome: ScanOutcome) -> str:
    if outcome.composition is not None:
        return f"{outcome.path.name}: {outcome.composition}"
    return f"{outcome.path.name}: {outcome.error}"
