from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from . import models
from typing import List, Optional, Dict, Any, Tuple, Type
from datetime import datetime, timezone
import logging

from utils.errors import ConflictError

logger = logging.getLogger(__name__)

def _now() -> datetime:
    return datetime.now(timezone.utc)

def count_words(text: Optional[str]) -> int:
    """Number of whitespace-separated words; empty or missing text counts as 0."""
    if not text:
        return 0
    return len(text.split())

def _save(db: Session, instance, commit: bool = True):
    db.add(instance)
    if commit:
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Integrity error saving {type(instance).__name__}: {e.orig}")
            raise ConflictError(str(e.orig)) from e
        db.refresh(instance)
    else:
        db.flush()
    return instance

def _delete(db: Session, model: Type, entity_id: int) -> bool:
    instance = db.get(model, entity_id)
    if not instance:
        return False
    db.delete(instance)
    db.commit()
    return True

# Novel CRUD
def create_novel(db: Session, title: str, description: Optional[str] = "") -> models.Novel:
    return _save(db, models.Novel(title=title, description=description or ""))

def get_novel(db: Session, novel_id: int) -> Optional[models.Novel]:
    return db.get(models.Novel, novel_id)

def get_novels(db: Session) -> List[models.Novel]:
    return db.query(models.Novel).order_by(models.Novel.updated_at.desc(), models.Novel.id.desc()).all()

def update_novel(db: Session, novel_id: int, title: str, description: Optional[str] = "") -> Optional[models.Novel]:
    db_novel = get_novel(db, novel_id)
    if db_novel:
        db_novel.title = title
        db_novel.description = description or ""
        db_novel.updated_at = _now()
        _save(db, db_novel)
    return db_novel

def touch_novel(db: Session, novel_id: int, commit: bool = True) -> None:
    """Bump a novel's updated_at so recently edited novels sort first."""
    db.query(models.Novel).filter(models.Novel.id == novel_id).update(
        {models.Novel.updated_at: _now()}, synchronize_session=False
    )
    if commit:
        db.commit()

def delete_novel(db: Session, novel_id: int) -> bool:
    return _delete(db, models.Novel, novel_id)

# Chapter CRUD
def create_chapter(db: Session, novel_id: int, title: str, content: Optional[str] = "", order_index: int = 0) -> models.Chapter:
    content = content or ""
    db_chapter = models.Chapter(
        novel_id=novel_id,
        title=title,
        content=content,
        order_index=order_index,
        word_count=count_words(content)
    )
    _save(db, db_chapter, commit=False)
    touch_novel(db, novel_id, commit=False)
    db.commit()
    db.refresh(db_chapter)
    return db_chapter

def get_chapter(db: Session, chapter_id: int) -> Optional[models.Chapter]:
    return db.get(models.Chapter, chapter_id)

def get_chapters(db: Session, novel_id: int) -> List[models.Chapter]:
    return (
        db.query(models.Chapter)
        .filter(models.Chapter.novel_id == novel_id)
        .order_by(models.Chapter.order_index, models.Chapter.id)
        .all()
    )

def set_chapter_text(db: Session, db_chapter: models.Chapter, title: str, content: Optional[str], word_count: Optional[int] = None) -> models.Chapter:
    """Overwrite a chapter's title and content without committing."""
    content = content or ""
    db_chapter.title = title
    db_chapter.content = content
    db_chapter.word_count = count_words(content) if word_count is None else word_count
    db_chapter.updated_at = _now()
    db.flush()
    return db_chapter

def delete_chapter(db: Session, chapter_id: int) -> bool:
    db_chapter = get_chapter(db, chapter_id)
    if not db_chapter:
        return False
    novel_id = db_chapter.novel_id
    db.delete(db_chapter)
    touch_novel(db, novel_id, commit=False)
    db.commit()
    return True

# Chapter version CRUD
def create_chapter_version(db: Session, db_chapter: models.Chapter, version_note: str, commit: bool = True) -> models.ChapterVersion:
    """Snapshot the chapter's current title and content."""
    db_version = models.ChapterVersion(
        chapter_id=db_chapter.id,
        title=db_chapter.title,
        content=db_chapter.content,
        word_count=db_chapter.word_count or count_words(db_chapter.content),
        version_note=version_note
    )
    return _save(db, db_version, commit=commit)

def get_chapter_versions(db: Session, chapter_id: int) -> List[models.ChapterVersion]:
    return (
        db.query(models.ChapterVersion)
        .filter(models.ChapterVersion.chapter_id == chapter_id)
        .order_by(models.ChapterVersion.created_at.desc(), models.ChapterVersion.id.desc())
        .all()
    )

def get_chapter_version(db: Session, version_id: int) -> Optional[models.ChapterVersion]:
    return db.get(models.ChapterVersion, version_id)

# Character CRUD
def get_character(db: Session, character_id: int) -> Optional[models.Character]:
    return db.get(models.Character, character_id)

def get_character_by_name(db: Session, novel_id: int, name: str) -> Optional[models.Character]:
    return db.query(models.Character).filter(
        models.Character.novel_id == novel_id,
        models.Character.name == name
    ).first()

def get_characters(db: Session, novel_id: int) -> List[models.Character]:
    return db.query(models.Character).filter(models.Character.novel_id == novel_id).order_by(models.Character.name).all()

def upsert_character(db: Session, novel_id: int, name: str, description: Optional[str] = "", traits: Optional[str] = "", commit: bool = True) -> Tuple[models.Character, bool]:
    """
    Insert a character unless one with the same name already exists in the novel.

    An existing character is returned untouched, so repeated calls are idempotent.

    Returns:
        (character, created)
    """
    existing = get_character_by_name(db, novel_id, name)
    if existing:
        return existing, False
    db_character = models.Character(novel_id=novel_id, name=name, description=description or "", traits=traits or "")
    return _save(db, db_character, commit=commit), True

def update_character(db: Session, character_id: int, name: str, description: Optional[str] = "", traits: Optional[str] = "") -> Optional[models.Character]:
    db_character = get_character(db, character_id)
    if db_character:
        db_character.name = name
        db_character.description = description or ""
        db_character.traits = traits or ""
        _save(db, db_character)
    return db_character

def delete_character(db: Session, character_id: int) -> bool:
    return _delete(db, models.Character, character_id)

# Place CRUD
def get_place(db: Session, place_id: int) -> Optional[models.Place]:
    return db.get(models.Place, place_id)

def get_places(db: Session, novel_id: int) -> List[models.Place]:
    return db.query(models.Place).filter(models.Place.novel_id == novel_id).order_by(models.Place.name).all()

def upsert_place(db: Session, novel_id: int, name: str, description: Optional[str] = "", commit: bool = True) -> Tuple[models.Place, bool]:
    existing = db.query(models.Place).filter(models.Place.novel_id == novel_id, models.Place.name == name).first()
    if existing:
        return existing, False
    return _save(db, models.Place(novel_id=novel_id, name=name, description=description or ""), commit=commit), True

def update_place(db: Session, place_id: int, name: str, description: Optional[str] = "") -> Optional[models.Place]:
    db_place = get_place(db, place_id)
    if db_place:
        db_place.name = name
        db_place.description = description or ""
        _save(db, db_place)
    return db_place

def delete_place(db: Session, place_id: int) -> bool:
    return _delete(db, models.Place, place_id)

# Event CRUD
def get_event(db: Session, event_id: int) -> Optional[models.Event]:
    return db.get(models.Event, event_id)

def get_events(db: Session, novel_id: int) -> List[models.Event]:
    return (
        db.query(models.Event)
        .filter(models.Event.novel_id == novel_id)
        .order_by(models.Event.created_at.desc(), models.Event.id.desc())
        .all()
    )

def event_exists(db: Session, novel_id: int, chapter_id: Optional[int], description: str) -> bool:
    return db.query(models.Event.id).filter(
        models.Event.novel_id == novel_id,
        models.Event.chapter_id == chapter_id,
        models.Event.description == description
    ).first() is not None

def create_event(db: Session, novel_id: int, title: str, description: Optional[str] = "", chapter_id: Optional[int] = None, commit: bool = True) -> models.Event:
    db_event = models.Event(novel_id=novel_id, title=title, description=description or "", chapter_id=chapter_id)
    return _save(db, db_event, commit=commit)

def update_event(db: Session, event_id: int, title: str, description: Optional[str] = "", chapter_id: Optional[int] = None) -> Optional[models.Event]:
    db_event = get_event(db, event_id)
    if db_event:
        db_event.title = title
        db_event.description = description or ""
        db_event.chapter_id = chapter_id
        _save(db, db_event)
    return db_event

def delete_event(db: Session, event_id: int) -> bool:
    return _delete(db, models.Event, event_id)

# Lore CRUD
def get_lore_entry(db: Session, lore_id: int) -> Optional[models.Lore]:
    return db.get(models.Lore, lore_id)

def get_lore(db: Session, novel_id: int) -> List[models.Lore]:
    return (
        db.query(models.Lore)
        .filter(models.Lore.novel_id == novel_id)
        .order_by(models.Lore.category, models.Lore.title)
        .all()
    )

def create_lore(db: Session, novel_id: int, title: str, content: Optional[str] = "", category: Optional[str] = "") -> models.Lore:
    return _save(db, models.Lore(novel_id=novel_id, title=title, content=content or "", category=category or ""))

def update_lore(db: Session, lore_id: int, title: str, content: Optional[str] = "", category: Optional[str] = "") -> Optional[models.Lore]:
    db_lore = get_lore_entry(db, lore_id)
    if db_lore:
        db_lore.title = title
        db_lore.content = content or ""
        db_lore.category = category or ""
        _save(db, db_lore)
    return db_lore

def delete_lore(db: Session, lore_id: int) -> bool:
    return _delete(db, models.Lore, lore_id)

# Item CRUD
def get_item(db: Session, item_id: int) -> Optional[models.Item]:
    return db.get(models.Item, item_id)

def get_items(db: Session, novel_id: int) -> List[models.Item]:
    return db.query(models.Item).filter(models.Item.novel_id == novel_id).order_by(models.Item.name).all()

def upsert_item(db: Session, novel_id: int, name: str, description: Optional[str] = "", properties: Optional[str] = "", commit: bool = True) -> Tuple[models.Item, bool]:
    existing = db.query(models.Item).filter(models.Item.novel_id == novel_id, models.Item.name == name).first()
    if existing:
        return existing, False
    db_item = models.Item(novel_id=novel_id, name=name, description=description or "", properties=properties or "")
    return _save(db, db_item, commit=commit), True

def update_item(db: Session, item_id: int, name: str, description: Optional[str] = "", properties: Optional[str] = "") -> Optional[models.Item]:
    db_item = get_item(db, item_id)
    if db_item:
        db_item.name = name
        db_item.description = description or ""
        db_item.properties = properties or ""
        _save(db, db_item)
    return db_item

def delete_item(db: Session, item_id: int) -> bool:
    return _delete(db, models.Item, item_id)

# Note CRUD
def get_note(db: Session, note_id: int) -> Optional[models.Note]:
    return db.get(models.Note, note_id)

def get_notes(db: Session, novel_id: int) -> List[models.Note]:
    return (
        db.query(models.Note)
        .filter(models.Note.novel_id == novel_id)
        .order_by(models.Note.updated_at.desc(), models.Note.id.desc())
        .all()
    )

def create_note(db: Session, novel_id: int, title: str, content: Optional[str] = "", category: Optional[str] = "") -> models.Note:
    return _save(db, models.Note(novel_id=novel_id, title=title, content=content or "", category=category or ""))

def update_note(db: Session, note_id: int, title: str, content: Optional[str] = "", category: Optional[str] = "") -> Optional[models.Note]:
    db_note = get_note(db, note_id)
    if db_note:
        db_note.title = title
        db_note.content = content or ""
        db_note.category = category or ""
        db_note.updated_at = _now()
        _save(db, db_note)
    return db_note

def delete_note(db: Session, note_id: int) -> bool:
    return _delete(db, models.Note, note_id)

# AI prompt CRUD
def get_ai_prompt(db: Session, prompt_id: int) -> Optional[models.AIPrompt]:
    return db.get(models.AIPrompt, prompt_id)

def get_ai_prompts(db: Session, novel_id: int, active_only: bool = False) -> List[models.AIPrompt]:
    query = db.query(models.AIPrompt).filter(models.AIPrompt.novel_id == novel_id)
    if active_only:
        query = query.filter(models.AIPrompt.is_active.is_(True))
    return query.order_by(
        models.AIPrompt.priority.desc(),
        models.AIPrompt.created_at.desc(),
        models.AIPrompt.id.desc()
    ).all()

def _replace_prompt_contexts(db: Session, db_prompt: models.AIPrompt, contexts: List[Dict[str, Any]]) -> None:
    db_prompt.contexts.clear()
    db.flush()
    for context in contexts:
        db_prompt.contexts.append(models.AIPromptContext(
            context_type=context.get("context_type"),
            context_id=context.get("context_id") or None
        ))

def create_ai_prompt(
    db: Session,
    novel_id: int,
    name: str,
    category: str,
    prompt_text: str,
    is_active: bool = True,
    priority: int = 0,
    contexts: Optional[List[Dict[str, Any]]] = None,
    is_system: bool = False
) -> models.AIPrompt:
    db_prompt = models.AIPrompt(
        novel_id=novel_id,
        name=name,
        category=category,
        prompt_text=prompt_text,
        is_active=is_active,
        is_system=is_system,
        priority=priority
    )
    for context in contexts or []:
        db_prompt.contexts.append(models.AIPromptContext(
            context_type=context.get("context_type"),
            context_id=context.get("context_id") or None
        ))
    return _save(db, db_prompt)

def update_ai_prompt(
    db: Session,
    prompt_id: int,
    name: str,
    category: str,
    prompt_text: str,
    is_active: bool = True,
    priority: int = 0,
    contexts: Optional[List[Dict[str, Any]]] = None
) -> Optional[models.AIPrompt]:
    """Update a user prompt. System prompts are read-only and yield None like a missing prompt."""
    db_prompt = get_ai_prompt(db, prompt_id)
    if not db_prompt or db_prompt.is_system:
        return None
    db_prompt.name = name
    db_prompt.category = category
    db_prompt.prompt_text = prompt_text
    db_prompt.is_active = is_active
    db_prompt.priority = priority
    db_prompt.updated_at = _now()
    _replace_prompt_contexts(db, db_prompt, contexts or [])
    return _save(db, db_prompt)

def delete_ai_prompt(db: Session, prompt_id: int) -> bool:
    db_prompt = get_ai_prompt(db, prompt_id)
    if not db_prompt or db_prompt.is_system:
        return False
    db.delete(db_prompt)
    db.commit()
    return True

# Outline CRUD
def get_outline(db: Session, outline_id: int) -> Optional[models.Outline]:
    return db.get(models.Outline, outline_id)

def get_outlines(db: Session, novel_id: int) -> List[models.Outline]:
    return (
        db.query(models.Outline)
        .filter(models.Outline.novel_id == novel_id)
        .order_by(models.Outline.updated_at.desc(), models.Outline.id.desc())
        .all()
    )

def create_outline(db: Session, novel_id: int, title: str, description: Optional[str] = "", commit: bool = True) -> models.Outline:
    return _save(db, models.Outline(novel_id=novel_id, title=title, description=description or ""), commit=commit)

def update_outline(db: Session, outline_id: int, title: str, description: Optional[str] = "") -> Optional[models.Outline]:
    db_outline = get_outline(db, outline_id)
    if db_outline:
        db_outline.title = title
        db_outline.description = description or ""
        db_outline.updated_at = _now()
        _save(db, db_outline)
    return db_outline

def delete_outline(db: Session, outline_id: int) -> bool:
    return _delete(db, models.Outline, outline_id)

# Outline section CRUD
def get_outline_section(db: Session, section_id: int) -> Optional[models.OutlineSection]:
    return db.get(models.OutlineSection, section_id)

def get_outline_sections(db: Session, outline_id: int) -> List[models.OutlineSection]:
    return (
        db.query(models.OutlineSection)
        .filter(models.OutlineSection.outline_id == outline_id)
        .order_by(models.OutlineSection.level, models.OutlineSection.order_index, models.OutlineSection.id)
        .all()
    )

def create_outline_section(db: Session, outline_id: int, commit: bool = True, **fields: Any) -> models.OutlineSection:
    """Create a section; ``fields`` are title, description, content, order_index, parent_id, level, chapter_id."""
    db_section = models.OutlineSection(outline_id=outline_id, **fields)
    return _save(db, db_section, commit=commit)

def update_outline_section(db: Session, section_id: int, **fields: Any) -> Optional[models.OutlineSection]:
    db_section = get_outline_section(db, section_id)
    if db_section:
        for key, value in fields.items():
            setattr(db_section, key, value)
        db_section.updated_at = _now()
        _save(db, db_section)
    return db_section

def delete_outline_section(db: Session, section_id: int) -> bool:
    return _delete(db, models.OutlineSection, section_id)
