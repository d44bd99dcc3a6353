"""Vietnamese phone number validation and canonicalization.

Numbers are accepted in domestic form (``0`` prefix), with the ``+84``
country code, or with a bare ``84`` prefix. Spaces, dots, dashes and
parentheses are ignored. Valid numbers canonicalize to ``84`` followed by
nine digits.
"""

import re
from typing import Any

COUNTRY_CODE = "84"

# Characters stripped before matching.
SEPARATOR_PATTERN = re.compile(r"[\s\ufeff.\-()]")

# 09x, 08x, 07x, 05x, 03[2-9]
_MOBILE_PREFIX = r"(9[0-9]|8[0-9]|7[0-9]|5[0-9]|3[2-9])"

NUMBERING_PLAN = (
    re.compile(rf"^0{_MOBILE_PREFIX}[0-9]{{7}}$"),  # domestic mobile
    re.compile(r"^02[0-9][0-9]{7}$"),  # domestic landline
    re.compile(rf"^\+84{_MOBILE_PREFIX}[0-9]{{7}}$"),  # +84 mobile
    re.compile(r"^\+842[0-9][0-9]{7}$"),  # +84 landline
    re.compile(rf"^84{_MOBILE_PREFIX}[0-9]{{7}}$"),  # 84 mobile
    re.compile(r"^842[0-9][0-9]{7}$"),  # 84 landline
)


def clean_number(raw: str) -> str:
    """Strip separators (whitespace, ``.``, ``-``, parentheses) from ``raw``."""
    return SEPARATOR_PATTERN.sub("", raw)


def is_valid(raw: Any) -> bool:
    """Return True when ``raw`` is a valid Vietnamese phone number.

    Args:
        raw: Phone number as found in the source. Anything that is not a
            non-empty string is rejected.

    Returns:
        Whether the cleaned value matches one of the numbering plan patterns.
    """
    if not raw or not isinstance(raw, str):
        return False

    cleaned = clean_number(raw)
    return any(pattern.match(cleaned) for pattern in NUMBERING_PLAN)


def format_number(raw: Any) -> Any:
    """Format a phone number as ``84xxxxxxxxx``.

    Invalid numbers come back with separators stripped but are otherwise
    untouched, so callers must check :func:`is_valid` before trusting the
    result. Empty or non-string input is returned as given.
    """
    if not raw or not isinstance(raw, str):
        return raw

    cleaned = clean_number(raw)

    if is_valid(raw):
        if cleaned.startswith("+" + COUNTRY_CODE):
            return cleaned[1:]
        if cleaned.startswith(COUNTRY_CODE):
            return cleaned
        if cleaned.startswith("0"):
            return COUNTRY_CODE + cleaned[1:]

    return cleaned
