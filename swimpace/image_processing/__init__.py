"""
Image processing functionality for split-time extraction
"""

from .preprocessing import preprocess_for_small_text

__all__ = [
    'preprocess_for_small_text'
]
