"""Regex extraction of grading parameters from natural-language text.

This is a fallback reader for text produced by a language model asked to
answer in the form ``contrast: 0.15, ... lift: RGB(0, -0.1, 0.1)``. It never
raises: unmatched fields are simply absent from the result, and the caller
merges what was found onto neutral defaults with ``merge_parameters()``.

Magnitudes above 1 are read as percentages ("30" == 0.3), since generators
emit both scales interchangeably. Exactly 1 is taken as a fraction.
"""
import logging
import re
from typing import Union

from gradecube.params.schema import RGBTriple

logger = logging.getLogger(__name__)

_NUMBER = r"([+-]?(?:\d+\.?\d*|\.\d+))"
_SEP = r"[,\s]+"

_SCALAR_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (key, re.compile(label + r"[:\s]*" + _NUMBER, re.IGNORECASE))
    for key, label in (
        ("contrast", r"contrast"),
        ("saturation", r"saturation"),
        ("temperature", r"temperature"),
        ("tint", r"tint"),
        ("shadows", r"shadows?"),
        ("highlights", r"highlights?"),
    )
)

_RGB_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (
        key,
        re.compile(
            key + r"[:\s]*(?:rgb)?[:\s]*\(?" + _NUMBER + _SEP + _NUMBER + _SEP + _NUMBER + r"\)?",
            re.IGNORECASE,
        ),
    )
    for key in ("lift", "gamma", "gain")
)

ExtractedValue = Union[float, RGBTriple]


def normalize_magnitude(value: float) -> float:
    """Scale percentages down to fractions and clamp to [-1, 1], keeping the sign."""
    magnitude = abs(value)
    if magnitude > 1:
        magnitude /= 100.0
    magnitude = min(magnitude, 1.0)
    return -magnitude if value < 0 else magnitude


def extract_parameters(text: str) -> dict[str, ExtractedValue]:
    """Pull whatever grading fields can be found in ``text``.

    Returns a partial mapping suitable for ``merge_parameters()``; empty when
    nothing matched.
    """
    found: dict[str, ExtractedValue] = {}
    if not isinstance(text, str) or not text:
        return found

    for key, pattern in _SCALAR_PATTERNS:
        match = pattern.search(text)
        if match:
            found[key] = normalize_magnitude(float(match.group(1)))

    for key, pattern in _RGB_PATTERNS:
        match = pattern.search(text)
        if match:
            r, g, b = (normalize_magnitude(float(v)) for v in match.groups())
            found[key] = RGBTriple(r=r, g=g, b=b)

    logger.debug("extracted fields from free text: %s", sorted(found) or "none")
    return found
