"""
Extraction of slash-delimited passages.

Readers mark passages on the page as ``/like this/``. Only the marked
text is kept; the rest of the page is discarded.
"""

import re
from dataclasses import dataclass, field
from typing import List

# Non-greedy so "/a/b/c/" yields "a" and "c"
DELIMITED_PATTERN = re.compile(r"/(.*?)/", re.DOTALL)

SEGMENT_SEPARATOR = "\n\n"


@dataclass
class ExtractionResult:
    """Marked segments found in a text, in source order."""
    segments: List[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        """False means no delimited content was found."""
        return bool(self.segments)

    @property
    def text(self) -> str:
        """Segments joined as paragraphs."""
        return SEGMENT_SEPARATOR.join(self.segments)


class DelimiterExtractor:
    """Pulls ``/.../``-delimited passages out of text."""

    def __init__(self, pattern: re.Pattern = DELIMITED_PATTERN):
        self.pattern = pattern

    def extract(self, text: str) -> ExtractionResult:
        """
        Find every marked passage.

        Each match is trimmed; matches that trim to nothing are dropped.
        """
        segments = []
        for match in self.pattern.finditer(text or ""):
            segment = match.group(1).strip()
            if segment:
                segments.append(segment)

        return ExtractionResult(segments=segments)
