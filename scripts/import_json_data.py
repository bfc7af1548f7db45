#!/usr/bin/env python3
"""
Import novels and story elements from the legacy JSON data directory.

The legacy store kept one file per table (``novels.json``, ``chapters.json``,
...) with camelCase keys. Rows keep their ids so references between files
stay valid. A row that fails to insert is logged and skipped; everything else
is committed in one transaction.
"""
import argparse
import json
import os
import shutil
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

# Add parent directory to Python path to import project modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from db import models
from db.crud import count_words
from db.database import SessionLocal, Base, engine
from db.session_manager import managed_db_transaction
from utils.config import settings
from utils.logging import SessionLogger, get_logger

logger = get_logger(__name__)

def _timestamp(value: Any) -> datetime:
    if value:
        try:
            return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            logger.warning(f"Unparseable timestamp {value!r}, using current time")
    return models.utcnow()

def novel_row(data: Dict[str, Any]) -> Dict[str, Any]:
    return dict(
        id=data.get("id"),
        title=data.get("title") or "Untitled",
        description=data.get("description") or "",
        created_at=_timestamp(data.get("createdAt")),
        updated_at=_timestamp(data.get("updatedAt"))
    )

def chapter_row(data: Dict[str, Any]) -> Dict[str, Any]:
    return dict(
        id=data.get("id"),
        novel_id=data.get("novelId"),
        title=data.get("title") or "Untitled Chapter",
        content=data.get("content") or "",
        order_index=data.get("order") or 0,
        word_count=count_words(data.get("content"))
    )

def character_row(data: Dict[str, Any]) -> Dict[str, Any]:
    return dict(
        id=data.get("id"),
        novel_id=data.get("novelId"),
        name=data.get("name") or "Unknown",
        description=data.get("description") or "",
        traits=data.get("traits") or ""
    )

def place_row(data: Dict[str, Any]) -> Dict[str, Any]:
    return dict(
        id=data.get("id"),
        novel_id=data.get("novelId"),
        name=data.get("name") or "Unknown Place",
        description=data.get("description") or ""
    )

def event_row(data: Dict[str, Any]) -> Dict[str, Any]:
    return dict(
        id=data.get("id"),
        novel_id=data.get("novelId"),
        title=data.get("title") or "Untitled Event",
        description=data.get("description") or "",
        chapter_id=data.get("chapterId") or None
    )

def lore_row(data: Dict[str, Any]) -> Dict[str, Any]:
    return dict(
        id=data.get("id"),
        novel_id=data.get("novelId"),
        title=data.get("title") or "Untitled Lore",
        content=data.get("content") or "",
        category=data.get("category") or ""
    )

def item_row(data: Dict[str, Any]) -> Dict[str, Any]:
    return dict(
        id=data.get("id"),
        novel_id=data.get("novelId"),
        name=data.get("name") or "Unknown Item",
        description=data.get("description") or "",
        properties=data.get("properties") or ""
    )

# Parents before children so foreign keys resolve
TABLES: List = [
    ("novels", models.Novel, novel_row),
    ("chapters", models.Chapter, chapter_row),
    ("characters", models.Character, character_row),
    ("places", models.Place, place_row),
    ("events", models.Event, event_row),
    ("lore", models.Lore, lore_row),
    ("items", models.Item, item_row),
]

def load_json(path: Path) -> List[Dict[str, Any]]:
    if not path.exists():
        return []
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error reading {path.name}: {e}")
        return []

def backup_database() -> Optional[Path]:
    """Copy the SQLite database file aside; returns the backup path or None."""
    if not settings.is_sqlite():
        return None
    db_path = Path(settings.DATABASE_URL.replace("sqlite:///", "", 1))
    if not db_path.exists():
        return None
    backup_path = db_path.with_name(f"{db_path.stem}_backup_{int(datetime.now().timestamp())}{db_path.suffix}")
    shutil.copyfile(db_path, backup_path)
    logger.info(f"Backed up existing database to {backup_path}")
    return backup_path

def import_rows(db: Session, table: str, model, rows: List[Dict[str, Any]], build: Callable) -> int:
    """Insert rows one statement at a time; a rejected row leaves the transaction usable."""
    imported = 0
    for data in rows:
        try:
            db.execute(insert(model).values(**build(data)))
        except SQLAlchemyError as e:
            logger.error(f"Error importing {table} row {data.get('id')}: {e}")
            continue
        imported += 1
    return imported

def import_data(db: Session, data_dir: Path) -> Dict[str, int]:
    """Import every legacy JSON file found in ``data_dir``; returns per-table counts."""
    counts = {}
    with managed_db_transaction(db) as tx_db:
        for table, model, build in TABLES:
            counts[table] = import_rows(tx_db, table, model, load_json(data_dir / f"{table}.json"), build)
    return counts

def main():
    parser = argparse.ArgumentParser(description="Import legacy JSON data into the Local Lore database")
    parser.add_argument("data_dir", nargs="?", default=str(settings.DATA_DIR), help="Directory holding novels.json, chapters.json, ...")
    args = parser.parse_args()

    SessionLogger.start_session("import_json_data")
    data_dir = Path(args.data_dir)
    if not any((data_dir / f"{table}.json").exists() for table, _, _ in TABLES):
        print("No JSON files found. Nothing to import.")
        return 0

    backup_database()
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        counts = import_data(db, data_dir)
    except SQLAlchemyError as e:
        logger.error(f"Import failed: {e}")
        print(f"Error: {e}")
        return 1
    finally:
        db.close()

    print("Import completed successfully!")
    for table, count in counts.items():
        print(f"  {table}: {count}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
