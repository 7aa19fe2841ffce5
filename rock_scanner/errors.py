from __future__ import annotations


class ScannerError(Exception):
    """Base class for screenshot scanning failures."""


class ImageIOError(ScannerError):
    """Screenshot could not be opened or decoded."""


class AnchorNotFoundError(ScannerError):
    """The "SCAN RESULTS" label was not found in the detection window."""


class EncodingError(ScannerError):
    """A cropped region could not be re-encoded for OCR."""


class FieldExtractionError(ScannerError):
    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"rock {field} fetch error: {reason}")
        self.field = field
        self.reason = reason


class OcrError(ScannerError):
    """Tesseract failed to read a region."""
