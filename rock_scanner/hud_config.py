"""Fixed HUD layout and vocabulary for the cockpit scan panel."""

from rock_scanner.geometry import NormalizedRect

# Characters the scan panel can render.
OCR_WHITELIST_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ "
OCR_WHITELIST = OCR_WHITELIST_LETTERS + "0123456789.%:()-"

# Same value on purpose: gates both OCR confidence (as a 0-1 ratio) and label similarity.
NEEDED_CONFIDENCE = 0.82
NEEDED_SIMILARITY = 0.82

# Tesseract scale (0-100). Below this the anchor is still used, with a warning.
LOW_ANCHOR_CONFIDENCE = 50

ROCK_CATEGORIES = (
    "ASTEROID (C-TYPE)",
    "ASTEROID (E-TYPE)",
    "ASTEROID (Q-TYPE)",
    "ASTEROID (M-TYPE)",
    "ASTEROID (P-TYPE)",
    "ASTEROID (S-TYPE)",
)

SCAN_RESULTS_LABEL = "SCAN RESULTS"
MASS_LABEL = "MASS:"
RESISTANCE_LABEL = "RESISTANCE:"
INSTABILITY_LABEL = "INSTABILITY:"

# Where "SCAN RESULTS" sits in the cockpit view, as fractions of the screenshot.
SCAN_RESULTS_WINDOW = NormalizedRect(left=0.66, top=0.385, right=0.795, bottom=0.45)

# Composition panel, relative to the "SCAN RESULTS" label.
COMPOSITION_LEFT_PAD = 0.007  # of image width
COMPOSITION_WIDTH_FACTOR = 1.45  # of label width, past its right edge
COMPOSITION_HEIGHT_FACTOR = 10  # of label height, past its bottom edge

DEFAULT_SCREENSHOTS = tuple(f"screenshot-{index}.png" for index in range(1, 7))
