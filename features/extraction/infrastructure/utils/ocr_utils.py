"""
OCR Utilities Module

Common helper functions for OCR processing:
- Image preprocessing for scanned pages and photos
- Tesseract command-line configuration
"""

from __future__ import annotations

import cv2
import numpy as np
from PIL import Image


# Median window used to estimate the paper background; wider than any glyph.
BACKGROUND_KERNEL = 31


def preprocess_for_ocr(pil_img: Image.Image) -> Image.Image:
    """
    Binarize a scanned page or photographed document for Tesseract.

    Steps:
    1. Grayscale + light Gaussian blur
    2. Divide by a median-blurred copy to flatten shadows and uneven lighting
    3. Otsu threshold on the flattened page
    4. 3x3 median to drop isolated speckles

    Dots of i/j and thin punctuation survive (no morphological opening).
    """
    img = np.array(pil_img.convert("RGB"))
    gray = cv2.cvtColor(img, cv2.COLOR_RGB2GRAY)
    gray = cv2.GaussianBlur(gray, (3, 3), 0)

    background = cv2.medianBlur(gray, BACKGROUND_KERNEL)
    flat = cv2.divide(gray, background, scale=255)

    _, binary = cv2.threshold(flat, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
    binary = cv2.medianBlur(binary, 3)

    return Image.fromarray(binary)


def tesseract_config(oem: int = 1, psm: int = 3) -> str:
    """
    Build the Tesseract config string.

    Note:
        OEM 1 = LSTM neural net mode.
        PSM modes:
        - 3: Fully automatic page segmentation (default)
        - 4: Assume a single column of text
        - 6: Assume a uniform block of text
        - 11: Sparse text (find as much text as possible)
    """
    return f"--oem {oem} --psm {psm}"
