"""
Vocabulary Annotation Module
Auto-link glossary words inside Portable Text content.

Features:
- Longest-term-first matching with suffix absorption
- Span splitting that keeps existing decorators
- Reference annotations for every match
- Idempotent: already annotated spans are skipped

Usage:
    from core.vocabulary import annotate_document, parse_document

    blocks = parse_document(content)
    annotated = annotate_document(blocks, items)
"""

from .annotator import BlockAnnotator, VocabularyAnnotator, annotate_document
from .keys import KeyGenerator, random_key
from .lookup import StaticVocabularyLookup, VocabularyLookup
from .matcher import Segment, TermSegmenter, build_match_pattern, order_vocabulary
from .schemas import (
    AnnotationDefinition, Block, OpaqueBlock, OpaqueChild, Reference, Span,
    VocabularyItem, dump_document, parse_document,
)
from .service import AnnotationResult, VocabularyAnnotationService

__all__ = [
    "BlockAnnotator",
    "VocabularyAnnotator",
    "annotate_document",
    "KeyGenerator",
    "random_key",
    "StaticVocabularyLookup",
    "VocabularyLookup",
    "Segment",
    "TermSegmenter",
    "build_match_pattern",
    "order_vocabulary",
    "AnnotationDefinition",
    "Block",
    "OpaqueBlock",
    "OpaqueChild",
    "Reference",
    "Span",
    "VocabularyItem",
    "dump_document",
    "parse_document",
    "AnnotationResult",
    "VocabularyAnnotationService",
]

__version__ = "1.0.0"
