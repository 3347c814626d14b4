"""
OCR Engine

Recognizes text lines on a photographed page with Tesseract.
"""

import asyncio
import io
import time
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

import pytesseract
from loguru import logger
from PIL import Image

from pagemark.errors import OCREngineError

ImageSource = Union[Image.Image, bytes, str, Path]


@dataclass
class OCRResult:
    """Result of OCR on an image."""
    lines: List[str] = field(default_factory=list)  # Reading order
    engine_used: str = "unknown"
    processing_time_ms: float = 0.0

    @property
    def text(self) -> str:
        """Lines joined with newlines."""
        return "\n".join(self.lines)

    @property
    def has_text(self) -> bool:
        return len(self.text.strip()) > 0


def load_image(image: ImageSource) -> Image.Image:
    """
    Decode an image handle to a PIL image.

    Accepts an already-open image, encoded bytes or a file path.

    Raises:
        OCREngineError: If the data cannot be decoded
    """
    if isinstance(image, Image.Image):
        return image

    try:
        if isinstance(image, (bytes, bytearray)):
            decoded = Image.open(io.BytesIO(image))
        else:
            decoded = Image.open(Path(image))
        decoded.load()
    except (OSError, ValueError) as e:
        raise OCREngineError("Unable to process image", detail=str(e)) from e

    return decoded


class OCREngine(ABC):
    """Anything that turns a page image into text lines."""

    name = "unknown"

    @abstractmethod
    def recognize(self, image: ImageSource) -> OCRResult:
        """
        Recognize text lines in an image.

        Raises:
            OCREngineError: If the engine fails
        """


class TesseractOCREngine(OCREngine):
    """
    Tesseract-backed OCR.

    Words are grouped back into lines using Tesseract's block, paragraph
    and line numbers, so lines come out in reading order.
    """

    name = "tesseract"

    def __init__(
        self,
        languages: str = "eng",
        confidence_threshold: float = 0.0,
        tesseract_config: str = "--oem 3 --psm 6",
    ):
        """
        Initialize the OCR engine.

        Args:
            languages: Tesseract language codes, joined with '+'
            confidence_threshold: Minimum word confidence (0-1) to keep
            tesseract_config: Extra Tesseract CLI options
        """
        self.languages = languages
        self.confidence_threshold = confidence_threshold
        self.tesseract_config = tesseract_config

        logger.info(f"TesseractOCREngine initialized (lang: {languages})")

    def recognize(self, image: ImageSource) -> OCRResult:
        start_time = time.time()
        page = load_image(image)

        try:
            data = pytesseract.image_to_data(
                page,
                lang=self.languages,
                config=self.tesseract_config,
                output_type=pytesseract.Output.DICT,
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as e:
            logger.error(f"Tesseract error: {e}")
            raise OCREngineError("Text recognition failed", detail=str(e)) from e

        lines = self._group_lines(data)

        return OCRResult(
            lines=lines,
            engine_used=self.name,
            processing_time_ms=(time.time() - start_time) * 1000,
        )

    def _group_lines(self, data: dict) -> List[str]:
        """Rebuild lines from Tesseract word boxes."""
        lines: dict = {}
        min_conf = self.confidence_threshold * 100

        for i in range(len(data["text"])):
            word = data["text"][i].strip()
            if not word or float(data["conf"][i]) < min_conf:
                continue

            key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
            lines.setdefault(key, []).append(word)

        return [" ".join(words) for words in lines.values()]


class AsyncOCREngine:
    """
    Async wrapper for OCR processing.

    Runs the blocking engine on a worker thread so a capture can be
    awaited, timed out and abandoned.
    """

    def __init__(self, engine: OCREngine, max_workers: int = 1):
        self.engine = engine
        self.executor = ThreadPoolExecutor(max_workers=max_workers)

    def submit(self, image: ImageSource) -> asyncio.Future:
        """Start recognition and return the pending result."""
        loop = asyncio.get_running_loop()
        return loop.run_in_executor(self.executor, self.engine.recognize, image)

    def shutdown(self, wait: bool = False) -> None:
        self.executor.shutdown(wait=wait)
