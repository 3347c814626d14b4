"""
Capture Module

Turns photographed pages into candidate notes:
- OCR via Tesseract (or any OCREngine)
- Cleanup of common OCR artifacts
- Extraction of /slash-delimited/ passages
- Cancellable capture sessions
"""

from pagemark.capture.ocr_engine import (
    OCREngine,
    OCRResult,
    TesseractOCREngine,
    AsyncOCREngine,
    load_image,
)
from pagemark.capture.text_normalizer import TextNormalizer, NormalizationResult
from pagemark.capture.delimiter_extractor import DelimiterExtractor, ExtractionResult
from pagemark.capture.orchestrator import (
    CaptureSession,
    CaptureResult,
    CaptureState,
    FailureReason,
    process_recognized_lines,
)

__all__ = [
    "OCREngine",
    "OCRResult",
    "TesseractOCREngine",
    "AsyncOCREngine",
    "load_image",
    "TextNormalizer",
    "NormalizationResult",
    "DelimiterExtractor",
    "ExtractionResult",
    "CaptureSession",
    "CaptureResult",
    "CaptureState",
    "FailureReason",
    "process_recognized_lines",
]
