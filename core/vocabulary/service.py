"""
Vocabulary Annotation Service
Fetches vocabulary items and runs the annotator over a document.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .annotator import VocabularyAnnotator, count_annotations
from .lookup import VocabularyLookup
from .schemas import DocumentBlock

logger = logging.getLogger(__name__)


@dataclass
class AnnotationResult:
    """Annotated content and how many annotations were added."""
    content: List[DocumentBlock]
    annotation_count: int
    vocabulary_count: int


class VocabularyAnnotationService:
    """
    Coordinates the vocabulary lookup and the annotator.

    The lookup is injected; a failing lookup yields no items and the
    document comes back unchanged.
    """

    def __init__(self, lookup: VocabularyLookup, annotator: Optional[VocabularyAnnotator] = None):
        self.lookup = lookup
        self.annotator = annotator or VocabularyAnnotator()

    def annotate(self, content: Sequence[DocumentBlock], vocabulary_ids: List[str]) -> AnnotationResult:
        """Link the given vocabulary items wherever they occur in ``content``."""
        items = self.lookup.get_vocabulary_items(list(vocabulary_ids)) if vocabulary_ids else []
        if not items:
            logger.info("No vocabulary items to apply, content unchanged")
            return AnnotationResult(content=list(content), annotation_count=0, vocabulary_count=0)

        annotated = self.annotator.annotate(content, items)
        return AnnotationResult(
            content=annotated,
            annotation_count=count_annotations(content, annotated),
            vocabulary_count=len(items),
        )


def build_service(settings=None) -> VocabularyAnnotationService:
    """Build a service backed by the SQLite vocabulary store described by settings."""
    from config.settings import settings as default_settings
    from .repository import VocabularyRepository

    settings = settings or default_settings
    repository = VocabularyRepository(
        db_path=str(settings.vocabulary_db_path),
        schema_name=settings.vocabulary_schema_name,
    )
    annotator = VocabularyAnnotator(
        word_start=settings.vocabulary_match_word_start,
        key_length=settings.annotation_key_length,
    )
    return VocabularyAnnotationService(repository, annotator)
