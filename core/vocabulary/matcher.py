"""
Term Segmenter
Engine for splitting span text at vocabulary term occurrences.
"""
import re
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, List, Optional, Tuple

from .schemas import VocabularyItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Segment:
    """A slice of span text, optionally claimed by a vocabulary item."""
    text: str
    item: Optional[VocabularyItem] = None

    @property
    def is_match(self) -> bool:
        return self.item is not None


def order_vocabulary(items: Iterable[VocabularyItem]) -> List[VocabularyItem]:
    """
    Order items longest word first.

    Returns a new list; ties keep their input order (``sorted`` is stable).
    """
    return sorted(items, key=lambda item: len(item.word), reverse=True)


@lru_cache(maxsize=1024)
def build_match_pattern(word: str, word_start: bool = False) -> "re.Pattern[str]":
    """
    Build the case-insensitive pattern for one term.

    The match starts with the term and absorbs any following word
    characters, so "cat" captures "cats" and "catalog" whole. No left
    boundary is checked unless ``word_start`` is set: by default "cat"
    also matches inside "concatenate" (as "catenate").

    The whole match is a single capturing group so ``split`` keeps it.
    """
    prefix = r"\b" if word_start else ""
    return re.compile(rf"{prefix}({re.escape(word)}\w*)", re.IGNORECASE)


class TermSegmenter:
    """
    Splits text into matched and unmatched segments.

    Terms are applied longest first. Once a piece of text is claimed by
    a term, later (shorter or equal) terms never split or reclaim it.
    """

    def __init__(self, items: Iterable[VocabularyItem], word_start: bool = False):
        """
        Initialize segmenter.

        Args:
            items: Vocabulary items, any order
            word_start: Only match at the start of a word
        """
        self.word_start = word_start
        self.terms: List[Tuple[VocabularyItem, "re.Pattern[str]"]] = []

        for item in order_vocabulary(items):
            if not item.word:
                logger.warning(f"Skipping vocabulary item {item.id} with empty word")
                continue
            try:
                pattern = build_match_pattern(item.word, word_start)
            except re.error as e:
                logger.warning(f"Regex error for term '{item.word}': {e}")
                continue
            self.terms.append((item, pattern))

    def __bool__(self) -> bool:
        return bool(self.terms)

    def segment(self, text: str) -> List[Segment]:
        """
        Split text into segments.

        Args:
            text: Span text

        Returns:
            Segments in left-to-right order; their texts concatenate to ``text``
        """
        if not text:
            return []

        segments = [Segment(text)]
        for item, pattern in self.terms:
            segments = [
                piece
                for segment in segments
                for piece in self._split(segment, item, pattern)
            ]
        return segments

    @staticmethod
    def _split(segment: Segment, item: VocabularyItem, pattern: "re.Pattern[str]") -> List[Segment]:
        if segment.is_match:
            return [segment]

        # With one capturing group, odd indices are the matched pieces
        pieces = pattern.split(segment.text)
        return [
            Segment(piece, item if index % 2 else None)
            for index, piece in enumerate(pieces)
            if piece
        ]
