"""
Vocabulary Database Models
SQLAlchemy model for the vocabulary store.
"""
from datetime import datetime
import uuid

from sqlalchemy import String, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column, declarative_base

from .schemas import VocabularyItem

Base = declarative_base()


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


class VocabularyItemRecord(Base):
    """
    Stored vocabulary item.

    Attributes:
        id: Unique identifier (UUID unless given)
        type: Namespaced schema type, e.g. "glossary.vocabularyItem"
        word: Term looked up in text
    """

    __tablename__ = "vocabulary_items"

    # Primary key
    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=generate_uuid
    )

    # Item data
    type: Mapped[str] = mapped_column(String(255), nullable=False)
    word: Mapped[str] = mapped_column(String(500), nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        Index("idx_vocabulary_type", "type"),
    )

    def __repr__(self):
        return f"<VocabularyItem {self.word} ({self.type})>"

    def to_item(self) -> VocabularyItem:
        """Convert to the read-only value handed to the annotator."""
        return VocabularyItem(id=self.id, type=self.type, word=self.word)
