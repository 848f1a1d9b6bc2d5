"""
Vocabulary Annotator Custom Exceptions
"""
from typing import List, Optional


class VocabularyError(Exception):
    """Base exception for vocabulary annotation"""
    pass


class VocabularyLookupError(VocabularyError):
    """The vocabulary store could not be queried"""
    def __init__(self, message: str, ids: Optional[List[str]] = None):
        self.ids = list(ids or [])
        super().__init__(f"Vocabulary lookup failed for {len(self.ids)} id(s): {message}")
