"""Read the rock composition panel below the "SCAN RESULTS" label."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional, Sequence

import numpy as np
from PIL import Image

from rock_scanner.config import OcrTesseractConfig
from rock_scanner.errors import FieldExtractionError
from rock_scanner.fuzzy import is_known_category, is_similar
from rock_scanner.geometry import PixelRect, composition_rect
from rock_scanner.hud_config import (
    COMPOSITION_HEIGHT_FACTOR,
    COMPOSITION_LEFT_PAD,
    COMPOSITION_WIDTH_FACTOR,
    INSTABILITY_LABEL,
    MASS_LABEL,
    NEEDED_CONFIDENCE,
    OCR_WHITELIST,
    RESISTANCE_LABEL,
)
from rock_scanner.ocr_tools import TesseractClient, WordBox, dump_crop, encode_png

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RockComposition:
    category: str
    mass: int
    resistance: int
    instability: float

    def __str__(self) -> str:
        return (
            f"{self.category} | mass: {self.mass} | "
            f"resistance: {self.resistance}% | instability: {self.instability:g}"
        )


def _parse_float32(text: str) -> float:
    return float(np.float32(float(text)))


@dataclass(frozen=True)
class FieldSpec:
    """How a labelled panel line is recognised and parsed."""

    name: str
    label: str
    trim_chars: str
    value_chars: str
    parse: Callable[[str], float]


FIELD_SPECS: Dict[str, FieldSpec] = {
    "mass": FieldSpec("mass", MASS_LABEL, "\n", "", int),
    "resistance": FieldSpec("resistance", RESISTANCE_LABEL, "\n .", " %", int),
    "instability": FieldSpec("instability", INSTABILITY_LABEL, "\n%. :", " ", _parse_float32),
}


def fetch_category(boxes: Iterable[WordBox]) -> str:
    for box in boxes:
        word = box.text.strip("\n .:%")
        known = is_known_category(word)
        logger.debug(
            "word found raw=%r word=%r confidence=%.1f known=%s origin=%s size=%dx%d",
            box.text,
            word,
            box.confidence,
            known,
            box.box.origin,
            box.box.width,
            box.box.height,
        )
        if box.ratio >= NEEDED_CONFIDENCE and known:
            return word
    raise FieldExtractionError("category", "rock category not found in derived cropped image")


def fetch_field(boxes: Iterable[WordBox], field_spec: FieldSpec) -> float:
    """Parse the value of the first confident line whose label resembles ``field_spec.label``."""
    for box in boxes:
        words = box.text.strip(field_spec.trim_chars).strip().split(" ", 1)
        if box.ratio < NEEDED_CONFIDENCE or not is_similar(words[0], field_spec.label):
            continue
        if len(words) < 2:
            raise FieldExtractionError(field_spec.name, f"rock {field_spec.name} has no value: {box.text!r}")
        value = words[1].strip(field_spec.value_chars)
        try:
            return field_spec.parse(value)
        except ValueError as exc:
            raise FieldExtractionError(field_spec.name, f"rock {field_spec.name} parsing failed: {exc}") from exc
    raise FieldExtractionError(field_spec.name, f"rock {field_spec.name} not found in derived cropped image")


def composition_from_boxes(boxes: Sequence[WordBox]) -> RockComposition:
    return RockComposition(
        category=fetch_category(boxes),
        mass=fetch_field(boxes, FIELD_SPECS["mass"]),
        resistance=fetch_field(boxes, FIELD_SPECS["resistance"]),
        instability=fetch_field(boxes, FIELD_SPECS["instability"]),
    )


def composition_window(image: Image.Image, anchor: PixelRect) -> PixelRect:
    return composition_rect(
        anchor,
        image.size,
        left_pad=COMPOSITION_LEFT_PAD,
        width_factor=COMPOSITION_WIDTH_FACTOR,
        height_factor=COMPOSITION_HEIGHT_FACTOR,
    )


def extract_composition(
    image: Image.Image,
    anchor: PixelRect,
    settings: OcrTesseractConfig,
    debug_dir: Optional[Path] = None,
    tag: str = "",
) -> RockComposition:
    window = composition_window(image, anchor)
    logger.debug("detection box origin=%s size=%dx%d", window.origin, window.width, window.height)

    cropped = encode_png(image.crop(window.as_box()))
    dump_crop(debug_dir, f"{tag}_composition" if tag else "composition", cropped)

    with TesseractClient(settings) as client:
        client.set_whitelist(OCR_WHITELIST)
        client.set_image_from_bytes(cropped)
        boxes = client.word_boxes()

    return composition_from_boxes(boxes)
