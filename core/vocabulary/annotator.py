"""
Vocabulary Annotator
Rewrites Portable Text blocks so vocabulary matches become reference annotations.
"""
import logging
from typing import Iterable, List, Optional, Sequence

from .keys import DEFAULT_KEY_LENGTH, KeyGenerator, document_keys
from .matcher import Segment, TermSegmenter
from .schemas import (
    REFERENCE_TYPE, SPAN_TYPE,
    AnnotationDefinition, Block, Child, DocumentBlock, Reference, Span, VocabularyItem,
)

logger = logging.getLogger(__name__)


def make_annotation_definition(key: str, item: VocabularyItem) -> AnnotationDefinition:
    """Mark definition linking to a vocabulary item."""
    return AnnotationDefinition(
        key=key,
        type=item.annotation_type,
        item=Reference(ref=item.id, type=REFERENCE_TYPE),
    )


class BlockAnnotator:
    """
    Annotates the spans of a single block.

    Spans already carrying one of the block's annotations are skipped,
    so running the annotator twice gives the same result as running it once.
    """

    def __init__(self, segmenter: TermSegmenter, key_generator: KeyGenerator):
        self.segmenter = segmenter
        self.key_generator = key_generator

    def annotate(self, block: DocumentBlock) -> DocumentBlock:
        """Return a new block with matches split out and annotated. Opaque blocks come back as they are."""
        if not isinstance(block, Block) or not block.children:
            return block

        existing_keys = {d.key for d in block.mark_defs}
        children: List[Child] = []
        new_defs: List[AnnotationDefinition] = []

        for child in block.children:
            if not self._is_candidate(child, existing_keys):
                children.append(child)
                continue

            segments = self.segmenter.segment(child.text)
            if not any(s.is_match for s in segments):
                children.append(child)
                continue

            spans, defs = self._annotate_span(child, segments)
            children.extend(spans)
            new_defs.extend(defs)

        if new_defs:
            logger.debug(f"Block {block.key}: added {len(new_defs)} annotation(s)")
        return block.model_copy(update={
            "children": children,
            "mark_defs": [*block.mark_defs, *new_defs],
        })

    @staticmethod
    def _is_candidate(child: Child, existing_keys: set) -> bool:
        if not isinstance(child, Span) or not child.text:
            return False
        return not any(mark in existing_keys for mark in child.marks)

    def _annotate_span(self, span: Span, segments: Sequence[Segment]):
        spans: List[Span] = []
        defs: List[AnnotationDefinition] = []

        for segment in segments:
            marks = list(span.marks)
            if segment.is_match:
                mark_key = self.key_generator()
                defs.append(make_annotation_definition(mark_key, segment.item))
                marks.append(mark_key)
            spans.append(Span(
                type=SPAN_TYPE,
                key=self.key_generator(),
                text=segment.text,
                marks=marks,
            ))

        return spans, defs


class VocabularyAnnotator:
    """
    Applies vocabulary annotation across a whole document.

    Features:
    - Longest term first, stable for equal lengths
    - Case-insensitive matching that absorbs word suffixes
    - Keeps existing decorators on split spans
    - Never mutates its input
    """

    def __init__(self, word_start: bool = False, key_length: int = DEFAULT_KEY_LENGTH):
        """
        Initialize annotator.

        Args:
            word_start: Only match terms at the start of a word
            key_length: Length of generated ``_key`` values
        """
        self.word_start = word_start
        self.key_length = key_length

    def annotate(
        self,
        blocks: Sequence[DocumentBlock],
        items: Iterable[VocabularyItem],
        key_generator: Optional[KeyGenerator] = None,
    ) -> List[DocumentBlock]:
        """
        Annotate every block in order.

        Args:
            blocks: Document content
            items: Vocabulary items to link
            key_generator: Key source; defaults to one seeded with the document's keys

        Returns:
            New list of blocks
        """
        segmenter = TermSegmenter(items, word_start=self.word_start)
        if not segmenter:
            return list(blocks)

        if key_generator is None:
            key_generator = KeyGenerator(self.key_length, reserved=document_keys(blocks))

        block_annotator = BlockAnnotator(segmenter, key_generator)
        result = [block_annotator.annotate(block) for block in blocks]

        logger.info(
            f"Annotated {len(result)} block(s) with {len(segmenter.terms)} term(s): "
            f"{count_annotations(blocks, result)} new annotation(s)"
        )
        return result


def annotate_document(
    blocks: Sequence[DocumentBlock],
    items: Iterable[VocabularyItem],
    word_start: bool = False,
    key_length: int = DEFAULT_KEY_LENGTH,
) -> List[DocumentBlock]:
    """Annotate a document with vocabulary items. See ``VocabularyAnnotator``."""
    return VocabularyAnnotator(word_start=word_start, key_length=key_length).annotate(blocks, items)


def _definition_count(blocks: Sequence[DocumentBlock]) -> int:
    return sum(len(b.mark_defs) for b in blocks if isinstance(b, Block))


def count_annotations(before: Sequence[DocumentBlock], after: Sequence[DocumentBlock]) -> int:
    """Number of mark definitions added between two versions of a document."""
    return _definition_count(after) - _definition_count(before)
