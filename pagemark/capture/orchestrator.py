"""
Capture Orchestrator

Turns one photographed page into a candidate note:

    IDLE -> IMAGE_ACQUIRED -> RECOGNIZING -> CANDIDATE_READY
                                          -> FAILED(reason)
    any non-terminal state -> CANCELLED

The session never writes to the library. A candidate becomes a Note
only through confirm(), and the caller decides whether to persist it.
"""

import asyncio
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from loguru import logger

from pagemark.capture.delimiter_extractor import DelimiterExtractor
from pagemark.capture.ocr_engine import AsyncOCREngine, ImageSource, OCREngine
from pagemark.capture.text_normalizer import TextNormalizer
from pagemark.errors import CaptureStateError, OCREngineError
from pagemark.storage.records import Note

DEFAULT_OCR_TIMEOUT = 30.0

NO_TEXT_MESSAGE = "No text could be detected in the image"
NO_DELIMITED_MESSAGE = (
    "No text between forward slashes (/) was found. "
    "Make sure to capture text that includes /bracketed content/."
)


class CaptureState(str, Enum):
    """Where a capture session is."""
    IDLE = "idle"
    IMAGE_ACQUIRED = "image_acquired"
    RECOGNIZING = "recognizing"
    CANDIDATE_READY = "candidate_ready"
    FAILED = "failed"
    CANCELLED = "cancelled"


class FailureReason(str, Enum):
    """Why a capture produced no candidate."""
    NO_TEXT_DETECTED = "no_text_detected"
    NO_DELIMITED_CONTENT = "no_delimited_content_found"
    ENGINE_FAILURE = "engine_failure"


@dataclass
class CaptureResult:
    """Outcome of one capture attempt."""
    state: CaptureState
    candidate_text: Optional[str] = None
    segments: List[str] = field(default_factory=list)
    normalized_text: str = ""
    reason: Optional[FailureReason] = None
    message: Optional[str] = None
    detail: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.state is CaptureState.CANDIDATE_READY

    @classmethod
    def failed(
        cls,
        reason: FailureReason,
        message: str,
        detail: Optional[str] = None,
        normalized_text: str = "",
    ) -> "CaptureResult":
        return cls(
            state=CaptureState.FAILED,
            reason=reason,
            message=message,
            detail=detail,
            normalized_text=normalized_text,
        )

    @classmethod
    def cancelled(cls) -> "CaptureResult":
        return cls(state=CaptureState.CANCELLED)


def process_recognized_lines(
    lines: List[str],
    normalizer: Optional[TextNormalizer] = None,
    extractor: Optional[DelimiterExtractor] = None,
) -> CaptureResult:
    """
    Run normalization and extraction on recognized lines.

    Args:
        lines: OCR lines in reading order
        normalizer: Text normalizer (default instance if omitted)
        extractor: Delimiter extractor (default instance if omitted)

    Returns:
        CANDIDATE_READY result, or FAILED with NO_TEXT_DETECTED /
        NO_DELIMITED_CONTENT
    """
    normalizer = normalizer or TextNormalizer()
    extractor = extractor or DelimiterExtractor()

    raw_text = "\n".join(lines)
    if not raw_text.strip():
        return CaptureResult.failed(FailureReason.NO_TEXT_DETECTED, NO_TEXT_MESSAGE)

    normalized = normalizer.normalize(raw_text).normalized
    extraction = extractor.extract(normalized)

    if not extraction.found:
        return CaptureResult.failed(
            FailureReason.NO_DELIMITED_CONTENT,
            NO_DELIMITED_MESSAGE,
            normalized_text=normalized,
        )

    return CaptureResult(
        state=CaptureState.CANDIDATE_READY,
        candidate_text=extraction.text,
        segments=extraction.segments,
        normalized_text=normalized,
    )


class CaptureSession:
    """
    One capture attempt: image in, candidate text out.

    Only one recognition may be in flight per session. cancel() abandons
    the session; a result that arrives afterwards is discarded.

    Usage:
        session = CaptureSession(TesseractOCREngine(), timeout=30)
        result = await session.capture(photo_bytes)
        if result.succeeded:
            note = session.confirm(book.id, edited_text, page_number="42")
            repo.add_note(note)
    """

    def __init__(
        self,
        engine: Union[OCREngine, AsyncOCREngine],
        normalizer: Optional[TextNormalizer] = None,
        extractor: Optional[DelimiterExtractor] = None,
        timeout: Optional[float] = DEFAULT_OCR_TIMEOUT,
    ):
        """
        Initialize a capture session.

        Args:
            engine: OCR engine, wrapped for async use if needed
            normalizer: Text normalizer
            extractor: Delimiter extractor
            timeout: Seconds to wait for the engine; None waits forever
        """
        self.ocr = engine if isinstance(engine, AsyncOCREngine) else AsyncOCREngine(engine)
        self.normalizer = normalizer or TextNormalizer()
        self.extractor = extractor or DelimiterExtractor()
        self.timeout = timeout

        self._state = CaptureState.IDLE
        self._image: Optional[ImageSource] = None
        self._pending: Optional[asyncio.Future] = None
        self.result: Optional[CaptureResult] = None

    @property
    def state(self) -> CaptureState:
        return self._state

    def acquire(self, image: ImageSource) -> None:
        """Accept the still image for this session."""
        if self._state is not CaptureState.IDLE:
            raise CaptureStateError("acquire an image", self._state.value)

        self._image = image
        self._state = CaptureState.IMAGE_ACQUIRED

    async def recognize(self) -> CaptureResult:
        """
        Send the acquired image to the OCR engine and process the text.

        Engine errors and timeouts end in FAILED(ENGINE_FAILURE) with the
        engine's message.

        Raises:
            CaptureStateError: If no image is waiting or a recognition is
                already running
        """
        if self._state is not CaptureState.IMAGE_ACQUIRED:
            raise CaptureStateError("start recognition", self._state.value)

        self._state = CaptureState.RECOGNIZING
        self._pending = self.ocr.submit(self._image)

        try:
            ocr_result = await asyncio.wait_for(self._pending, timeout=self.timeout)
        except asyncio.CancelledError:
            if self._state is CaptureState.CANCELLED:
                logger.info("Capture cancelled while recognizing; result discarded")
                return self._finish(CaptureResult.cancelled())
            self._state = CaptureState.CANCELLED
            raise
        except asyncio.TimeoutError:
            logger.warning(f"OCR engine did not respond within {self.timeout}s")
            return self._finish(CaptureResult.failed(
                FailureReason.ENGINE_FAILURE,
                "Processing Error",
                detail=f"Text recognition timed out after {self.timeout} seconds",
            ))
        except OCREngineError as e:
            logger.warning(f"OCR engine failed: {e.message} ({e.detail})")
            return self._finish(CaptureResult.failed(
                FailureReason.ENGINE_FAILURE, e.message, detail=e.detail,
            ))
        except Exception as e:
            logger.exception("Unexpected OCR engine error")
            return self._finish(CaptureResult.failed(
                FailureReason.ENGINE_FAILURE, "Processing Error", detail=str(e),
            ))
        finally:
            self._pending = None
            self._image = None

        if self._state is CaptureState.CANCELLED:
            return self._finish(CaptureResult.cancelled())

        logger.debug(
            f"OCR returned {len(ocr_result.lines)} lines "
            f"in {ocr_result.processing_time_ms:.0f}ms ({ocr_result.engine_used})"
        )
        result = process_recognized_lines(ocr_result.lines, self.normalizer, self.extractor)

        if result.succeeded:
            logger.info(f"Capture ready: {len(result.segments)} marked passages")
        else:
            logger.info(f"Capture failed: {result.reason.value}")

        return self._finish(result)

    async def capture(self, image: ImageSource) -> CaptureResult:
        """Acquire an image and recognize it."""
        self.acquire(image)
        return await self.recognize()

    def cancel(self) -> None:
        """
        Abandon the session.

        Discards a waiting image or candidate; an in-flight recognition
        result is thrown away when it arrives. No effect once FAILED or
        CANCELLED.
        """
        if self._state in (CaptureState.FAILED, CaptureState.CANCELLED):
            return

        previous = self._state
        self._state = CaptureState.CANCELLED
        self._image = None

        if self._pending is not None and not self._pending.done():
            self._pending.cancel()

        if previous is not CaptureState.RECOGNIZING:
            self.result = CaptureResult.cancelled()

        logger.debug(f"Capture cancelled from {previous.value}")

    def discard(self) -> None:
        """Reject the candidate during review."""
        if self._state is not CaptureState.CANDIDATE_READY:
            raise CaptureStateError("discard a candidate", self._state.value)
        self.cancel()

    def confirm(
        self,
        book_id: uuid.UUID,
        final_text: str,
        page_number: Optional[str] = None,
        title: str = "",
    ) -> Note:
        """
        Build a Note from the reviewed candidate text.

        The note is returned, not saved.

        Raises:
            CaptureStateError: If there is no candidate
            RecordValidationError: If final_text is blank
        """
        if self._state is not CaptureState.CANDIDATE_READY:
            raise CaptureStateError("confirm a note", self._state.value)

        return Note.new(
            book_id=book_id,
            extracted_text=final_text,
            title=title,
            page_number=page_number,
        )

    def _finish(self, result: CaptureResult) -> CaptureResult:
        self._state = result.state
        self.result = result
        return result
