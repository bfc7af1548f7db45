from sqlalchemy.orm import Session
from typing import Dict

from db import crud
from db.session_manager import managed_db_transaction
from services.analyzer import analyze, AnalysisResult
from utils.errors import NotFoundError
from utils.logging import get_logger
from utils.timing import time_it

logger = get_logger(__name__)

@time_it("chapter_analysis")
def analyze_chapter(db: Session, chapter_id: int) -> AnalysisResult:
    """
    Run the analyzer over a chapter and store what it finds in the novel.

    Characters, places and items are keyed by name within the novel: names
    already on file are kept as they are. Events are stored once per
    sentence and chapter, so analyzing an unchanged chapter again adds nothing.

    Args:
        db: Database session
        chapter_id: ID of the chapter to analyze

    Returns:
        The raw analysis, including elements that were already stored

    Raises:
        NotFoundError: If the chapter does not exist
    """
    chapter = crud.get_chapter(db, chapter_id)
    if not chapter:
        raise NotFoundError("Chapter", chapter_id)

    analysis = analyze(chapter.content or "")
    novel_id = chapter.novel_id
    created: Dict[str, int] = {"characters": 0, "places": 0, "events": 0, "items": 0}

    with managed_db_transaction(db) as tx_db:
        for character in analysis.characters:
            _, is_new = crud.upsert_character(
                tx_db, novel_id, character.name,
                description=f"Appeared in chapter: {chapter.title}",
                commit=False
            )
            created["characters"] += int(is_new)

        for place in analysis.places:
            _, is_new = crud.upsert_place(tx_db, novel_id, place.name, description=place.context, commit=False)
            created["places"] += int(is_new)

        for index, event in enumerate(analysis.events, start=1):
            if crud.event_exists(tx_db, novel_id, chapter.id, event.text):
                continue
            crud.create_event(tx_db, novel_id, f"Event {index}", description=event.text, chapter_id=chapter.id, commit=False)
            created["events"] += 1

        for item in analysis.items:
            _, is_new = crud.upsert_item(tx_db, novel_id, item.name, description=item.context, commit=False)
            created["items"] += int(is_new)

    logger.info(
        f"Analyzed chapter {chapter_id} of novel {novel_id}",
        extra={"context": {"chapter_id": chapter_id, "novel_id": novel_id, "created": created}}
    )
    return analysis
