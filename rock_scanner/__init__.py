"""Read rock composition from cockpit HUD screenshots."""

from rock_scanner.composition import RockComposition, extract_composition
from rock_scanner.errors import (
    AnchorNotFoundError,
    EncodingError,
    FieldExtractionError,
    ImageIOError,
    ScannerError,
)
from rock_scanner.geometry import PixelRect
from rock_scanner.pipeline import ScanOutcome, open_picture, scan_files, scan_picture
from rock_scanner.scan_results import locate_scan_results

__all__ = [
    "RockComposition",
    "extract_composition",
    "AnchorNotFoundError",
    "EncodingError",
    "FieldExtractionError",
    "ImageIOError",
    "ScannerError",
    "PixelRect",
    "ScanOutcome",
    "open_picture",
    "scan_files",
    "scan_picture",
    "locate_scan_results",
]
