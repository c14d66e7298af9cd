"""
Shared utility functions.
"""

from siareg.utils.text_processing import normalize_text, vocabulary_key

__all__ = [
    # Text processing
    "normalize_text",
    "vocabulary_key",
]
