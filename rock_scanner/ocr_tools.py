"""Tesseract adapter returning text-line boxes for cropped HUD regions."""

from __future__ import annotations

import io
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import cv2
import numpy as np
import pytesseract
from PIL import Image, ImageOps
from pytesseract import Output

from rock_scanner.config import OcrTesseractConfig
from rock_scanner.errors import EncodingError, OcrError
from rock_scanner.geometry import PixelRect


@dataclass(frozen=True)
class WordBox:
    text: str
    confidence: float  # 0-100, as reported by Tesseract
    box: PixelRect  # relative to the crop that was read

    @property
    def ratio(self) -> float:
        return self.confidence / 100.0


def apply_tesseract_cmd(settings: OcrTesseractConfig) -> None:
    # Allow overriding the Tesseract binary path for environments without a default install.
    if settings.tesseract_cmd:
        pytesseract.pytesseract.tesseract_cmd = settings.tesseract_cmd


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    try:
        image.save(buffer, format="PNG")
    except (OSError, ValueError) as exc:
        raise EncodingError(f"cropped image encode error: {exc}") from exc
    return buffer.getvalue()


def dump_crop(debug_dir: Optional[Path], name: str, data: bytes) -> None:
    if debug_dir is None:
        return
    debug_dir.mkdir(parents=True, exist_ok=True)
    (debug_dir / f"{name}.png").write_bytes(data)


def _otsu(gray: Image.Image) -> Image.Image:
    image_np = np.array(gray)
    blurred = cv2.GaussianBlur(image_np, (3, 3), 0)
    _, thresh = cv2.threshold(blurred, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
    return Image.fromarray(thresh)


def preprocess_for_tesseract(image: Image.Image, settings: OcrTesseractConfig) -> Image.Image:
    if settings.scale != 1.0:
        width = max(1, int(image.width * settings.scale))
        height = max(1, int(image.height * settings.scale))
        image = image.resize((width, height), Image.BILINEAR)
    gray = ImageOps.autocontrast(image.convert("L"))
    if settings.otsu:
        gray = _otsu(gray)
    elif settings.threshold is not None:
        threshold = settings.threshold
        gray = gray.point(lambda p: 255 if p > threshold else 0)
    if settings.invert:
        gray = ImageOps.invert(gray)
    return gray


def tesseract_config(settings: OcrTesseractConfig, whitelist: str) -> str:
    config = f"--psm {settings.psm} --oem {settings.oem} -c preserve_interword_spaces=1"
    if whitelist:
        # Quoted so the whitelist can carry a space.
        config = f'{config} -c tessedit_char_whitelist="{whitelist}"'
    return config


def _safe_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")


def group_lines(data: Dict[str, List[Any]], scale: float = 1.0) -> List[WordBox]:
    """
    Merge image_to_data word tokens into text-line boxes keyed by (block, par, line).

    Lines keep Tesseract's reading order. Confidence is the mean of the word
    confidences; tokens reported with a negative confidence carry no text.
    """
    groups: Dict[Tuple[int, int, int], List[int]] = {}
    for index, raw in enumerate(data.get("text", [])):
        if not str(raw or "").strip():
            continue
        conf = _safe_float(data["conf"][index])
        if math.isnan(conf) or conf < 0:
            continue
        key = (
            int(data["block_num"][index]),
            int(data["par_num"][index]),
            int(data["line_num"][index]),
        )
        groups.setdefault(key, []).append(index)

    lines: List[WordBox] = []
    for indexes in groups.values():
        indexes.sort(key=lambda j: int(data["left"][j]))
        text = " ".join(str(data["text"][j]).strip() for j in indexes)
        left = min(int(data["left"][j]) for j in indexes)
        top = min(int(data["top"][j]) for j in indexes)
        right = max(int(data["left"][j]) + int(data["width"][j]) for j in indexes)
        bottom = max(int(data["top"][j]) + int(data["height"][j]) for j in indexes)
        confidence = sum(_safe_float(data["conf"][j]) for j in indexes) / len(indexes)
        box = PixelRect(
            int(left / scale),
            int(top / scale),
            int(right / scale),
            int(bottom / scale),
        )
        lines.append(WordBox(text=text, confidence=confidence, box=box))
    return lines


class TesseractClient:
    """
    One OCR session over a single encoded image.

    Acquire per detection call with ``with TesseractClient(settings) as client``;
    never share an instance between calls.
    """

    def __init__(self, settings: OcrTesseractConfig) -> None:
        apply_tesseract_cmd(settings)
        self._settings = settings
        self._whitelist = ""
        self._image: Optional[Image.Image] = None

    def __enter__(self) -> "TesseractClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def set_whitelist(self, whitelist: str) -> None:
        self._whitelist = whitelist

    def set_image_from_bytes(self, data: bytes) -> None:
        self.close()
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (OSError, ValueError) as exc:
            raise EncodingError(f"OCR input decode error: {exc}") from exc
        self._image = image

    def word_boxes(self) -> List[WordBox]:
        if self._image is None:
            raise OcrError("no image set on OCR client")
        processed = preprocess_for_tesseract(self._image, self._settings)
        try:
            data = pytesseract.image_to_data(
                processed,
                lang=self._settings.lang,
                config=tesseract_config(self._settings, self._whitelist),
                output_type=Output.DICT,
            )
        except pytesseract.TesseractError as exc:
            raise OcrError(f"tesseract failed: {exc}") from exc
        return group_lines(data, self._settings.scale)

    def close(self) -> None:
        if self._image is not None:
            self._image.close()
            self._image = None
