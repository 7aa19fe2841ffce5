"""Approximate text matching for noisy HUD OCR output."""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein

from rock_scanner.hud_config import NEEDED_SIMILARITY, ROCK_CATEGORIES


def similarity(a: str, b: str) -> float:
    """Levenshtein similarity normalized by the longer string, in [0, 1]."""
    return Levenshtein.normalized_similarity(a, b)


def is_similar(a: str, b: str, threshold: float = NEEDED_SIMILARITY) -> bool:
    return similarity(a, b) >= threshold


def is_known_category(word: str) -> bool:
    # Exact match only; near misses like "ASTEROID (C-TYPF)" are rejected.
    return word in ROCK_CATEGORIES
