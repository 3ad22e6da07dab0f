"""Class-name cleanup shared by every per-class extractor.

A class header scraped from the portal looks like::

    2054 - 1 Chemistry Honors Classwork Average 98.50

The *trimmed* form cuts it at ``Classwork``; the *short* form also drops the
three leading course-code words and any trailing noise tokens.  Both forms
are used as dictionary keys when per-class results are merged, so every
extractor must go through :func:`normalize_class_name`.
"""

from __future__ import annotations

import re

from hacapi.scraper.selectors import CONFIG

# Anything a float parser accepts: plain decimals, exponents, inf and nan.
_DECIMAL = re.compile(
    r"^[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)$",
    re.IGNORECASE,
)


def _is_noise(word: str) -> bool:
    if word in CONFIG.names.noise_words:
        return True
    if _DECIMAL.match(word):
        return True
    # Section letter, e.g. the trailing "A" in "AP Biology A"
    return len(word) == 1 and word.isalpha()


def shorten_class_name(full: str) -> str:
    """Drop course-code boilerplate and trailing noise from *full*.

    Returns an empty string when every remaining word is noise.
    """
    words = (full or "").split()
    if len(words) > CONFIG.names.boilerplate_words:
        words = words[CONFIG.names.boilerplate_words:]
    while words and _is_noise(words[-1]):
        words.pop()
    return " ".join(words)


def normalize_class_name(name: str, short: bool = False) -> str:
    """Return the merge key for a class header.

    Args:
        name: Header text as scraped.
        short: Also apply :func:`shorten_class_name`.
    """
    text = (name or "").strip()
    marker = text.find(CONFIG.names.classwork_marker)
    if marker != -1:
        text = text[:marker]
    text = text.strip()
    if short:
        return shorten_class_name(text)
    return text
