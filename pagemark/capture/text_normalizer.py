"""
Text Normalizer for Pagemark

Cleanup pass for recognized page text before extraction:
- Whitespace collapsing
- Missing-space repair after sentences and between merged words
- Character substitutions for common OCR misreads (| -> I, 0 -> O/o)

Rules run in a fixed order, each once over the whole string.
False positives such as product codes like "I0" are accepted.
"""

import re
from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class NormalizationResult:
    """Result of text normalization."""
    original: str
    normalized: str
    applied_rules: List[str] = field(default_factory=list)  # Names of rules that changed the text

    @property
    def was_modified(self) -> bool:
        return self.original != self.normalized


class TextNormalizer:
    """
    Normalizes OCR output of book pages.

    Usage:
        normalizer = TextNormalizer()
        normalizer.normalize("The end.Next |ine").normalized
        # "The end. Next Iine"
    """

    # (name, pattern, replacement) in application order
    RULES: List[Tuple[str, str, str]] = [
        ("collapse_whitespace", r"\s+", " "),
        # No-op once whitespace is collapsed; kept so the rule order stays fixed
        ("paragraph_breaks", r"\n\s*\n", "\n\n"),
        ("sentence_spacing", r"([.!?])([A-Z])", r"\1 \2"),
        ("split_merged_words", r"([a-z])([A-Z])", r"\1 \2"),
        ("pipe_to_I", r"\|", "I"),
        ("zero_before_letter", r"0(?=[a-zA-Z])", "O"),
        ("zero_after_letter", r"(?<=[a-zA-Z])0", "o"),
    ]

    def __init__(self):
        self._compiled = [
            (name, re.compile(pattern), replacement)
            for name, pattern, replacement in self.RULES
        ]

    def normalize(self, text: str) -> NormalizationResult:
        """
        Normalize OCR text output.

        Args:
            text: Recognized lines joined with newlines

        Returns:
            NormalizationResult with normalized text
        """
        if not text:
            return NormalizationResult(original="", normalized="")

        original = text
        applied = []

        for name, pattern, replacement in self._compiled:
            new_text = pattern.sub(replacement, text)
            if new_text != text:
                applied.append(name)
                text = new_text

        return NormalizationResult(
            original=original,
            normalized=text.strip(),
            applied_rules=applied,
        )

    def normalize_lines(self, lines: List[str]) -> NormalizationResult:
        """Join recognized lines in reading order and normalize them."""
        return self.normalize("\n".join(lines))
