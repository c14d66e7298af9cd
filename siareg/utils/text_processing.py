"""
Text processing utilities for siareg.

Small helpers for cleaning up text scraped out of the register's result cards.
"""

from typing import Optional


def normalize_text(text: Optional[str]) -> str:
    """
    Trim scraped text and drop a single trailing hyphen artifact.

    The register renders some values with a dangling separator (e.g. "Active -"),
    so after trimming we remove exactly one trailing "-" and trim again.

    Args:
        text: Raw text extracted from the page, or None if the field was absent

    Returns:
        Normalized string ("" for None)

    Example:
        >>> normalize_text("  Active - ")
        'Active'
        >>> normalize_text("Active")
        'Active'
    """
    if text is None:
        return ""

    output = text.strip()
    if output.endswith("-"):
        output = output[:-1]
    return output.strip()


def vocabulary_key(text: str) -> str:
    """
    Reduce text to a lookup key: alphanumerics only, lower-cased.

    Makes vocabulary matching resilient to spacing and punctuation drift,
    e.g. "Front Line", "Front-Line" and "FRONTLINE" all become "frontline".
    """
    return "".join(ch for ch in text if ch.isalnum()).lower()
