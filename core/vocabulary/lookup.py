"""
VocabularyLookup protocol — the contract every vocabulary source must satisfy.

Usage:
    items = lookup.get_vocabulary_items(["v1", "v2"])

Implementations never raise: on failure they log and return an empty list,
which turns annotation into a no-op.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Protocol, runtime_checkable

from .schemas import VocabularyItem

logger = logging.getLogger(__name__)


def matches_schema(item_type: str, schema_name: str) -> bool:
    """True if a (possibly namespaced) type belongs to the schema kind."""
    # Wider than an exact `_type == schema_name` check: "glossary.vocabularyItem"
    # also belongs to "vocabularyItem".
    return item_type == schema_name or item_type.endswith(f".{schema_name}")


@runtime_checkable
class VocabularyLookup(Protocol):
    """Source of vocabulary items for one schema kind."""

    def get_vocabulary_items(self, ids: List[str]) -> List[VocabularyItem]: ...


class StaticVocabularyLookup:
    """In-memory lookup over a fixed list of items."""

    def __init__(self, items: Iterable[VocabularyItem], schema_name: str = "vocabularyItem"):
        self.items = list(items)
        self.schema_name = schema_name

    def get_vocabulary_items(self, ids: List[str]) -> List[VocabularyItem]:
        wanted = set(ids)
        found = [
            item for item in self.items
            if item.id in wanted and matches_schema(item.type, self.schema_name)
        ]
        logger.debug(f"Static lookup: {len(found)} of {len(wanted)} id(s) found")
        return found
