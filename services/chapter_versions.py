"""
Chapter editing with version history.

Every overwrite of a chapter can leave a snapshot of the previous text in
``chapter_versions``. Writers ask for one explicitly, and large edits get one
automatically so that an accidental paste-over is always recoverable.
"""

from sqlalchemy.orm import Session
from typing import Optional

from db import crud, models
from db.session_manager import managed_db_transaction
from utils.config import settings
from utils.errors import NotFoundError
from utils.logging import get_logger

logger = get_logger(__name__)

AUTO_VERSION_NOTE = "Auto-saved version"
MANUAL_VERSION_NOTE = "Manual save"
RESTORE_VERSION_NOTE = "Before restore"

def needs_auto_version(old_content: Optional[str], new_content: str, threshold: Optional[int] = None) -> bool:
    """True when an edit replaces existing text and moves the word count by more than ``threshold``."""
    if threshold is None:
        threshold = settings.VERSION_WORD_DELTA
    if not old_content or old_content == new_content:
        return False
    return abs(crud.count_words(old_content) - crud.count_words(new_content)) > threshold

def update_chapter(
    db: Session,
    chapter_id: int,
    title: str,
    content: Optional[str] = "",
    save_version: bool = False,
    version_note: Optional[str] = ""
) -> models.Chapter:
    """
    Overwrite a chapter, snapshotting the previous state when asked to or when the edit is large.

    Raises:
        NotFoundError: If the chapter does not exist
    """
    chapter = crud.get_chapter(db, chapter_id)
    if not chapter:
        raise NotFoundError("Chapter", chapter_id)

    content = content or ""
    with managed_db_transaction(db) as tx_db:
        if save_version or needs_auto_version(chapter.content, content):
            crud.create_chapter_version(tx_db, chapter, version_note or AUTO_VERSION_NOTE, commit=False)
            logger.info(f"Saved version of chapter {chapter_id} before update")

        crud.set_chapter_text(tx_db, chapter, title, content)
        crud.touch_novel(tx_db, chapter.novel_id, commit=False)

    db.refresh(chapter)
    return chapter

def save_version(db: Session, chapter_id: int, version_note: Optional[str] = None) -> models.ChapterVersion:
    chapter = crud.get_chapter(db, chapter_id)
    if not chapter:
        raise NotFoundError("Chapter", chapter_id)
    return crud.create_chapter_version(db, chapter, version_note or MANUAL_VERSION_NOTE)

def restore_version(db: Session, chapter_id: int, version_id: int) -> models.Chapter:
    """
    Replace a chapter's text with a stored version.

    The text being replaced is saved as a version first, so a restore can
    itself be undone.

    Raises:
        NotFoundError: If the chapter or the version does not exist
    """
    chapter = crud.get_chapter(db, chapter_id)
    if not chapter:
        raise NotFoundError("Chapter", chapter_id)
    version = crud.get_chapter_version(db, version_id)
    if not version or version.chapter_id != chapter.id:
        raise NotFoundError("Version", version_id)

    with managed_db_transaction(db) as tx_db:
        crud.create_chapter_version(tx_db, chapter, RESTORE_VERSION_NOTE, commit=False)
        crud.set_chapter_text(tx_db, chapter, version.title, version.content, word_count=version.word_count)
        crud.touch_novel(tx_db, chapter.novel_id, commit=False)

    logger.info(f"Restored chapter {chapter_id} to version {version_id}")
    db.refresh(chapter)
    return chapter
