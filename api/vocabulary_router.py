"""
Vocabulary API Router
FastAPI endpoints for annotating content with vocabulary items.
"""
from fastapi import APIRouter, Depends, Query, Request
from typing import List
import logging

from core.vocabulary.schemas import (
    AnnotateRequest, AnnotateResponse, VocabularyItem,
)
from core.vocabulary.service import VocabularyAnnotationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/vocabulary", tags=["Vocabulary"])


def get_service(request: Request) -> VocabularyAnnotationService:
    """Service configured on the application at startup."""
    return request.app.state.vocabulary_service


@router.post(
    "/annotate",
    response_model=AnnotateResponse,
    response_model_exclude_unset=True,
)
def annotate_content(
    data: AnnotateRequest,
    service: VocabularyAnnotationService = Depends(get_service),
):
    """
    Link vocabulary items wherever their words occur in the content.

    - **content**: Portable Text blocks
    - **vocabulary_ids**: ids of the vocabulary items to link

    Unknown ids are ignored. If the vocabulary store is unavailable the
    content is returned unchanged.
    """
    result = service.annotate(data.content, data.vocabulary_ids)
    logger.info(
        f"Annotate request: {len(data.content)} block(s), "
        f"{len(data.vocabulary_ids)} id(s), {result.annotation_count} annotation(s)"
    )
    return AnnotateResponse(content=result.content, annotation_count=result.annotation_count)


@router.get("/items", response_model=List[VocabularyItem])
def lookup_items(
    ids: List[str] = Query(..., description="Vocabulary item ids"),
    service: VocabularyAnnotationService = Depends(get_service),
):
    """Resolve vocabulary item ids the same way annotation does."""
    return service.lookup.get_vocabulary_items(ids)
