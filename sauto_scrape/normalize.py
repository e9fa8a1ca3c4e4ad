from __future__ import annotations
"""Normalization helpers for scraped text.

Responsibilities:
 - Extract the leading number of a human formatted fragment
   ('2016', '1,234 kW', '379 900 Kč' -> 379).
 - Collapse whitespace (incl. NBSP) in titles and labels.
 - Strip known unit suffixes (' kW').
"""
import re
from typing import Optional

from .errors import ParseError

# first run: optional minus, digits with ',' grouping, optional fraction
_RE_NUMBER = re.compile(r"-?\d[\d,]*(?:\.\d+)?")
_RE_SPACE = re.compile(r"\s+")

# cache fields are unsigned 64-bit
MAX_DIGITS = 20
MAX_VALUE = 2**64 - 1


def extract_number(text: Optional[str]) -> int:
    """Return the first numeric run of ``text`` as an unsigned integer.

    Commas are thousands separators and are dropped, a fractional part is
    truncated. Whitespace ends the run, so on the source site a price like
    '379 900 Kč' gives 379 (the figure in thousands).

    Raises:
        ParseError: no run found, the run is negative, or it does not fit
            an unsigned 64-bit integer.
    """
    if not text:
        raise ParseError("empty text")
    m = _RE_NUMBER.search(text)
    if not m:
        raise ParseError(f"no number in {text!r}")
    run = m.group(0)
    if run.startswith('-'):
        raise ParseError(f"negative number in {text!r}")
    digits = run.split('.', 1)[0].replace(',', '')
    if not digits:
        raise ParseError(f"no digits in {text!r}")
    if len(digits) > MAX_DIGITS:
        raise ParseError(f"number too long digits={len(digits)}")
    value = int(digits)
    if value > MAX_VALUE:
        raise ParseError(f"number out of range value={value}")
    return value


def clean_text(val: Optional[str]) -> str:
    if val is None:
        return ''
    return _RE_SPACE.sub(' ', val).strip()


def strip_suffix(text: str, suffix: str) -> str:
    t = clean_text(text)
    if suffix and t.endswith(suffix):
        t = t[:-len(suffix)]
    return t.strip()
