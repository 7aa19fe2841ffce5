from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import tomllib

from rock_scanner.hud_config import DEFAULT_SCREENSHOTS


@dataclass(frozen=True)
class OcrTesseractConfig:
    lang: str = "eng"
    psm: int = 3
    oem: int = 3
    scale: float = 1.0
    threshold: Optional[int] = None
    otsu: bool = False
    invert: bool = False
    tesseract_cmd: Optional[str] = None


@dataclass(frozen=True)
class ScannerConfig:
    inputs: tuple[Path, ...]
    debug: bool
    debug_dir: Optional[Path]


@dataclass(frozen=True)
class AppConfig:
    ocr: OcrTesseractConfig
    scanner: ScannerConfig


DEFAULT_CONFIG_PATH = Path("rock_scanner.toml")


def load_config(path: Optional[Path] = None) -> AppConfig:
    config_path = path or DEFAULT_CONFIG_PATH
    data: dict[str, Any] = {}
    if config_path.exists():
        data = tomllib.loads(config_path.read_text())

    def section(*keys: str) -> Mapping[str, Any]:
        current: Mapping[str, Any] = data
        for key in keys:
            value = current.get(key, {})
            if not isinstance(value, Mapping):
                return {}
            current = value
        return current

    def maybe_threshold(value: Optional[int]) -> Optional[int]:
        if value is None:
            return None
        return None if value < 0 else value

    defaults = OcrTesseractConfig()
    tesseract_section = section("ocr", "tesseract")
    ocr = OcrTesseractConfig(
        lang=str(tesseract_section.get("lang", defaults.lang)),
        psm=_maybe_int(tesseract_section.get("psm"), defaults.psm),
        oem=_maybe_int(tesseract_section.get("oem"), defaults.oem),
        scale=_maybe_float(tesseract_section.get("scale"), defaults.scale),
        threshold=maybe_threshold(_maybe_int(tesseract_section.get("threshold"), -1)),
        otsu=bool(tesseract_section.get("otsu", defaults.otsu)),
        invert=bool(tesseract_section.get("invert", defaults.invert)),
        tesseract_cmd=tesseract_section.get("tesseract_cmd") or None,
    )

    scanner_section = section("scanner")
    inputs = scanner_section.get("inputs")
    if not isinstance(inputs, list) or not inputs:
        inputs = list(DEFAULT_SCREENSHOTS)
    debug_dir = scanner_section.get("debug_dir")
    scanner = ScannerConfig(
        inputs=tuple(Path(str(item)) for item in inputs),
        debug=bool(scanner_section.get("debug", False)),
        debug_dir=Path(debug_dir) if debug_dir else None,
    )

    return AppConfig(ocr=ocr, scanner=scanner)


def _maybe_int(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _maybe_float(value: Any, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
