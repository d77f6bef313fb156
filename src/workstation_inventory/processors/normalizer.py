"""
Workstation name normalization for consistent matching.
"""

import unicodedata
from typing import Any, Optional


def normalize_name(name: Optional[Any], uppercase: bool = True) -> str:
    """
    Normalize a workstation name for comparison.

    Args:
        name: The workstation name as received
        uppercase: Fold to upper case when True, otherwise use casefold()

    Returns:
        Normalized name, or '' for missing and blank input
    """
    if name is None:
        return ''

    normalized = str(name).strip()
    if not normalized:
        return ''

    normalized = unicodedata.normalize('NFC', normalized)

    if uppercase:
        normalized = normalized.upper()
    else:
        normalized = normalized.casefold()

    # Case mapping can emit decomposed sequences.
    return unicodedata.normalize('NFC', normalized)


def is_blank(value: Any) -> bool:
    """Return True for None and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False
