"""
Vocabulary Repository
Database access layer for the vocabulary store.
"""
import logging
from typing import Optional, List
from pathlib import Path

from sqlalchemy import create_engine, or_
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .exceptions import VocabularyLookupError
from .models import Base, VocabularyItemRecord, generate_uuid
from .schemas import VocabularyItem

logger = logging.getLogger(__name__)


class VocabularyRepository:
    """
    Repository for vocabulary database operations.

    Implements the VocabularyLookup protocol on top of a SQLite store
    and offers CRUD for seeding it.
    """

    def __init__(self, db_path: str = "data/vocabulary.db", schema_name: str = "vocabularyItem"):
        """Initialize repository with database path and the schema kind to serve."""
        self.db_path = str(db_path)
        self.schema_name = schema_name
        self._engine = None
        self._session_factory = None

    @property
    def engine(self):
        """Get or create SQLAlchemy engine."""
        if self._engine is None:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False}
            )
            Base.metadata.create_all(self._engine)
        return self._engine

    @property
    def session_factory(self):
        """Get session factory."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self.engine)
        return self._session_factory

    def get_session(self) -> Session:
        """Get a new database session."""
        return self.session_factory()

    def _schema_filter(self):
        # Exact type or a namespaced one, same rule as lookup.matches_schema
        return or_(
            VocabularyItemRecord.type == self.schema_name,
            VocabularyItemRecord.type.endswith(f".{self.schema_name}", autoescape=True),
        )

    # ==================== LOOKUP ====================

    def fetch_items(self, ids: List[str]) -> List[VocabularyItem]:
        """
        Fetch items of the configured schema kind whose id is in ``ids``.

        Raises:
            VocabularyLookupError: the store could not be queried
        """
        if not ids:
            return []

        try:
            with self.get_session() as session:
                records = session.query(VocabularyItemRecord).filter(
                    VocabularyItemRecord.id.in_(ids),
                    self._schema_filter(),
                ).all()
                return [record.to_item() for record in records]
        except (SQLAlchemyError, OSError) as e:
            raise VocabularyLookupError(str(e), ids) from e

    def get_vocabulary_items(self, ids: List[str]) -> List[VocabularyItem]:
        """Fetch items, returning an empty list if the store fails."""
        try:
            items = self.fetch_items(ids)
        except VocabularyLookupError as e:
            logger.error(f"Error fetching vocabulary items: {e}")
            return []
        logger.debug(f"Fetched {len(items)} vocabulary item(s) for {len(ids)} id(s)")
        return items

    # ==================== ITEM OPERATIONS ====================

    def add_item(
        self,
        word: str,
        type: Optional[str] = None,
        id: Optional[str] = None,
    ) -> Optional[VocabularyItem]:
        """Add an item. Type defaults to the configured schema name."""
        with self.get_session() as session:
            record = VocabularyItemRecord(
                id=id or generate_uuid(),
                type=type or self.schema_name,
                word=word,
            )
            try:
                session.add(record)
                session.commit()
                session.refresh(record)
                logger.info(f"Added vocabulary item: {record.word} ({record.id})")
                return record.to_item()
            except IntegrityError:
                session.rollback()
                logger.warning(f"Duplicate vocabulary item id: {id}")
                return None

    def get_item(self, item_id: str) -> Optional[VocabularyItem]:
        """Get item by ID regardless of schema kind."""
        with self.get_session() as session:
            record = session.query(VocabularyItemRecord).filter(
                VocabularyItemRecord.id == item_id
            ).first()
            return record.to_item() if record else None

    def list_items(self, search: Optional[str] = None) -> List[VocabularyItem]:
        """List items of the configured schema kind, ordered by word."""
        with self.get_session() as session:
            query = session.query(VocabularyItemRecord).filter(self._schema_filter())
            if search:
                query = query.filter(VocabularyItemRecord.word.ilike(f"%{search}%"))
            return [r.to_item() for r in query.order_by(VocabularyItemRecord.word).all()]

    def delete_item(self, item_id: str) -> bool:
        """Delete an item."""
        with self.get_session() as session:
            record = session.query(VocabularyItemRecord).filter(
                VocabularyItemRecord.id == item_id
            ).first()

            if not record:
                return False

            session.delete(record)
            session.commit()
            logger.info(f"Deleted vocabulary item: {item_id}")
            return True
