"""
Split-time extraction from free text and OCR'd images
"""

from __future__ import annotations

import re
import math
import logging
from typing import List, Optional, Protocol, Tuple

import cv2
import numpy as np
import pytesseract

from ..image_processing.preprocessing import preprocess_for_small_text

logger = logging.getLogger(__name__)


TOKEN_SPLIT_RE = re.compile(r"[,\s]+")
NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
OCR_NOISE_RE = re.compile(r"[^0-9.:\s,]")

TESSERACT_PSM_MODES = (6, 4, 11)
TESSERACT_WHITELIST = "0123456789.:,"


def parse_splits(raw: str) -> List[float]:
    """
    Tokenize on commas/whitespace and keep finite positive numbers.
    Anything else (e.g. "1:02", "6_0", "abc", "-3", "0") is dropped silently.
    """
    splits: List[float] = []
    for token in TOKEN_SPLIT_RE.split(raw or ""):
        token = token.strip()
        if not NUMBER_RE.fullmatch(token):
            continue
        value = float(token)
        if math.isfinite(value) and value > 0:
            splits.append(value)
    return splits


def clean_ocr_text(text: str) -> str:
    """Blank out everything OCR might add around the digits"""
    return OCR_NOISE_RE.sub(" ", text or "")


def parse_ocr_splits(text: str) -> List[float]:
    return parse_splits(clean_ocr_text(text))


# =========================
# Text recognizers
# =========================

class TextRecognizer(Protocol):
    """Optional OCR capability; callers must check `available` first"""

    @property
    def available(self) -> bool:
        ...

    def recognize(self, image: np.ndarray) -> str:
        ...


class TesseractRecognizer:
    """pytesseract wrapper trying a few page segmentation modes per image variant"""

    def __init__(self, psm_modes: Tuple[int, ...] = TESSERACT_PSM_MODES):
        self.psm_modes = psm_modes
        self._available: Optional[bool] = None

    @property
    def available(self) -> bool:
        if self._available is None:
            try:
                version = pytesseract.get_tesseract_version()
                logger.debug(f"Tesseract {version} found")
                self._available = True
            except pytesseract.TesseractNotFoundError:
                logger.warning("⚠️  Tesseract binary not found, OCR disabled")
                self._available = False
        return self._available

    def _variants(self, image: np.ndarray) -> List[Tuple[str, np.ndarray]]:
        variants: List[Tuple[str, np.ndarray]] = []
        try:
            processed, _ = preprocess_for_small_text(image)
            variants.append(("preprocessed", processed))
        except cv2.error as e:
            logger.warning(f"⚠️  Failed to preprocess: {e}")

        gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY) if len(image.shape) == 3 else image
        variants.append(("grayscale", gray))
        return variants

    def recognize(self, image: np.ndarray) -> str:
        fallback_text = ""
        for variant_name, img in self._variants(image):
            for psm in self.psm_modes:
                config = f"--psm {psm} --oem 3 -c tessedit_char_whitelist={TESSERACT_WHITELIST}"
                try:
                    text = pytesseract.image_to_string(img, config=config)
                except pytesseract.TesseractError as e:
                    logger.warning(f"  → {variant_name} PSM {psm}: Tesseract failed: {e}")
                    continue

                logger.debug(f"  → {variant_name} PSM {psm}: {text[:200]!r}")
                if text.strip() and not fallback_text:
                    fallback_text = text
                if len(parse_ocr_splits(text)) >= 2:
                    logger.info(f"✅ OCR SUCCESS with {variant_name} PSM {psm}")
                    return text

        logger.warning("⚠️  OCR found fewer than two split times in any variant")
        return fallback_text


def extract_split_times(image: np.ndarray, recognizer: TextRecognizer) -> Tuple[str, List[float]]:
    """Run OCR and return (raw_text, split_times)"""
    text = recognizer.recognize(image)
    return text, parse_ocr_splits(text)
