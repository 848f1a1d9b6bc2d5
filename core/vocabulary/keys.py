"""
Key Generator
Fresh ``_key`` values for new spans and mark definitions.
"""
import logging
import uuid
from typing import Iterable, Optional, Set

from .schemas import Block, DocumentBlock

logger = logging.getLogger(__name__)

DEFAULT_KEY_LENGTH = 12


def random_key(length: int = DEFAULT_KEY_LENGTH) -> str:
    """Generate a random hex key of the given length (max 32)."""
    return uuid.uuid4().hex[:length]


def document_keys(blocks: Iterable[DocumentBlock]) -> Set[str]:
    """Collect every block, child and mark definition key in a document."""
    keys: Set[str] = set()
    for block in blocks:
        if isinstance(block.key, str) and block.key:
            keys.add(block.key)
        if not isinstance(block, Block):
            continue
        keys.update(d.key for d in block.mark_defs)
        keys.update(c.key for c in block.children if isinstance(c.key, str) and c.key)
    return keys


class KeyGenerator:
    """
    Issues keys unique within one document.

    Remembers everything it has issued plus any keys it was seeded with,
    and redraws on collision.
    """

    def __init__(self, length: int = DEFAULT_KEY_LENGTH, reserved: Optional[Iterable[str]] = None):
        if not 1 <= length <= 32:
            raise ValueError(f"Key length must be between 1 and 32, got {length}")
        self.length = length
        self._issued: Set[str] = set(reserved or ())

    def __call__(self) -> str:
        key = random_key(self.length)
        while key in self._issued:
            logger.debug(f"Key collision on {key}, redrawing")
            key = random_key(self.length)
        self._issued.add(key)
        return key

    def __contains__(self, key: str) -> bool:
        return key in self._issued
