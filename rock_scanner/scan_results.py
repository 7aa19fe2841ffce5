"""Locate the "SCAN RESULTS" label in a cockpit screenshot."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from PIL import Image

from rock_scanner.config import OcrTesseractConfig
from rock_scanner.errors import AnchorNotFoundError
from rock_scanner.fuzzy import similarity
from rock_scanner.geometry import PixelRect, rect_from_normalized
from rock_scanner.hud_config import (
    LOW_ANCHOR_CONFIDENCE,
    NEEDED_SIMILARITY,
    OCR_WHITELIST,
    SCAN_RESULTS_LABEL,
    SCAN_RESULTS_WINDOW,
)
from rock_scanner.ocr_tools import TesseractClient, WordBox, dump_crop, encode_png

logger = logging.getLogger(__name__)


def scan_results_window(size: tuple[int, int]) -> PixelRect:
    return rect_from_normalized(size, SCAN_RESULTS_WINDOW)


def find_anchor_box(boxes: Iterable[WordBox], window: PixelRect) -> Optional[WordBox]:
    """Return the first box whose text resembles the anchor label."""
    for box in boxes:
        word = box.text.strip("\n. ").strip()
        score = similarity(word, SCAN_RESULTS_LABEL)
        logger.debug(
            "word found raw=%r word=%r confidence=%.1f similarity=%.3f origin=%s size=%dx%d",
            box.text,
            word,
            box.confidence,
            score,
            box.box.translate(*window.origin).origin,
            box.box.width,
            box.box.height,
        )
        if score >= NEEDED_SIMILARITY:
            if box.confidence < LOW_ANCHOR_CONFIDENCE:
                logger.warning(
                    "scan results detection confidence is too low confidence=%.1f",
                    box.confidence,
                )
            return box
    return None


def locate_scan_results(
    image: Image.Image,
    settings: OcrTesseractConfig,
    debug_dir: Optional[Path] = None,
    tag: str = "",
) -> PixelRect:
    """Return the anchor label's rectangle in full-image coordinates."""
    window = scan_results_window(image.size)
    logger.debug("detection box origin=%s size=%dx%d", window.origin, window.width, window.height)

    cropped = encode_png(image.crop(window.as_box()))
    dump_crop(debug_dir, f"{tag}_scan_results" if tag else "scan_results", cropped)

    with TesseractClient(settings) as client:
        client.set_whitelist(OCR_WHITELIST)
        client.set_image_from_bytes(cropped)
        boxes = client.word_boxes()

    anchor = find_anchor_box(boxes, window)
    if anchor is None:
        raise AnchorNotFoundError("scan result string not found in detection box")
    return anchor.box.translate(*window.origin)
