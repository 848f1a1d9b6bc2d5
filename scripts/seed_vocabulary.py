#!/usr/bin/env python3
"""
Vocabulary Seeder — load vocabulary items from a JSON file into the store.

The file holds a list of ``{"_id": ..., "_type": ..., "word": ...}`` objects;
``_id`` and ``_type`` are optional.

Usage:
    python -m scripts.seed_vocabulary items.json
    python -m scripts.seed_vocabulary items.json --db data/vocabulary.db
    python -m scripts.seed_vocabulary --list
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Tuple

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from core.vocabulary.repository import VocabularyRepository

logger = logging.getLogger(__name__)


def seed_from_file(repository: VocabularyRepository, path: Path) -> Tuple[int, int]:
    """
    Add every item in the file to the repository.

    Returns:
        Tuple of (added_count, skipped_count)
    """
    with open(path, "r", encoding="utf-8") as f:
        entries: List[dict] = json.load(f)

    added = 0
    skipped = 0
    for entry in entries:
        word = entry.get("word")
        if not word:
            logger.warning("Skipping entry without word: %s", entry)
            skipped += 1
            continue
        item = repository.add_item(word=word, type=entry.get("_type"), id=entry.get("_id"))
        if item is None:
            skipped += 1
        else:
            added += 1

    logger.info("Seeded %d item(s) from %s, skipped %d", added, path, skipped)
    return added, skipped


def main():
    from config.settings import settings

    parser = argparse.ArgumentParser(description="Vocabulary Annotator - Store Seeder")
    parser.add_argument("file", nargs="?", type=str, help="JSON file with vocabulary items")
    parser.add_argument("--db", type=str, default=str(settings.vocabulary_db_path), help="SQLite database path")
    parser.add_argument("--list", action="store_true", help="List stored items")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    repository = VocabularyRepository(db_path=args.db, schema_name=settings.vocabulary_schema_name)

    if args.list:
        items = repository.list_items()
        print(f"Found {len(items)} item(s):")
        for item in items:
            print(f"  {item.id}  {item.word}  ({item.type})")
    elif args.file:
        added, skipped = seed_from_file(repository, Path(args.file))
        print(f"Added {added}, skipped {skipped}")
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
