"""
Text and OCR adapters feeding split times to the analyzer
"""

from .text_extractor import (
    parse_splits,
    parse_ocr_splits,
    clean_ocr_text,
    TextRecognizer,
    TesseractRecognizer,
    extract_split_times
)

__all__ = [
    'parse_splits',
    'parse_ocr_splits',
    'clean_ocr_text',
    'TextRecognizer',
    'TesseractRecognizer',
    'extract_split_times'
]
