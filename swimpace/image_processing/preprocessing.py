"""
Image preprocessing functions for OCR
"""

from typing import Tuple
import cv2
import numpy as np


def preprocess_for_small_text(image: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Preprocessing for split times on scoreboards and watch screenshots
    Returns: (processed_image, debug_image)
    """
    # Upscale small captures so digits clear Tesseract's size floor
    h, w = image.shape[:2]
    if h < 1000:
        scale = 3.0 if h < 400 else 2.0
        image = cv2.resize(image, (int(w * scale), int(h * scale)),
                           interpolation=cv2.INTER_CUBIC)

    # Convert to grayscale
    if len(image.shape) == 3:
        gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    else:
        gray = image

    # Tesseract wants dark text on a light background
    if float(np.mean(gray)) < 127:
        gray = cv2.bitwise_not(gray)

    denoised = cv2.fastNlMeansDenoising(gray, h=10)

    clahe = cv2.createCLAHE(clipLimit=3.0, tileGridSize=(8, 8))
    enhanced = clahe.apply(denoised)

    _, binary = cv2.threshold(enhanced, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)

    # Slight morphology to connect broken digit strokes
    kernel = np.ones((2, 2), np.uint8)
    processed = cv2.morphologyEx(binary, cv2.MORPH_CLOSE, kernel)

    debug = cv2.cvtColor(processed, cv2.COLOR_GRAY2BGR)

    return processed, debug
