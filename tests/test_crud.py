import pytest

from db import crud, models
from utils.errors import ConflictError

def test_count_words():
    assert crud.count_words(None) == 0
    assert crud.count_words("") == 0
    assert crud.count_words("  one\ttwo\nthree  ") == 3

def test_create_chapter_counts_words_and_touches_novel(db_session, novel):
    before = novel.updated_at
    chapter = crud.create_chapter(db_session, novel.id, "One", "It was a dark night", order_index=1)
    assert chapter.word_count == 5
    db_session.refresh(novel)
    assert novel.updated_at >= before

def test_chapters_ordered_by_order_index(db_session, novel):
    crud.create_chapter(db_session, novel.id, "Second", "", order_index=2)
    crud.create_chapter(db_session, novel.id, "First", "", order_index=1)
    assert [c.title for c in crud.get_chapters(db_session, novel.id)] == ["First", "Second"]

def test_novels_most_recently_updated_first(db_session):
    first = crud.create_novel(db_session, "First")
    second = crud.create_novel(db_session, "Second")
    assert [n.id for n in crud.get_novels(db_session)] == [second.id, first.id]

    crud.create_chapter(db_session, first.id, "Ch", "text")
    assert [n.id for n in crud.get_novels(db_session)] == [first.id, second.id]

def test_upsert_character_is_idempotent(db_session, novel):
    character, created = crud.upsert_character(db_session, novel.id, "Mary", "The heroine")
    assert created is True

    again, created = crud.upsert_character(db_session, novel.id, "Mary", "Someone else")
    assert created is False
    assert again.id == character.id
    assert again.description == "The heroine"
    assert len(crud.get_characters(db_session, novel.id)) == 1

def test_same_name_in_different_novels(db_session, novel):
    other = crud.create_novel(db_session, "Other")
    crud.upsert_place(db_session, novel.id, "Rivertown")
    _, created = crud.upsert_place(db_session, other.id, "Rivertown")
    assert created is True

def test_rename_to_existing_name_conflicts(db_session, novel):
    crud.upsert_item(db_session, novel.id, "silver key")
    lamp, _ = crud.upsert_item(db_session, novel.id, "brass lamp")
    with pytest.raises(ConflictError):
        crud.update_item(db_session, lamp.id, "silver key")

def test_update_missing_returns_none(db_session):
    assert crud.update_character(db_session, 999, "Nobody") is None
    assert crud.update_note(db_session, 999, "Nothing") is None
    assert crud.delete_place(db_session, 999) is False

def test_lore_sorted_by_category_then_title(db_session, novel):
    crud.create_lore(db_session, novel.id, "Dragons", "", "creatures")
    crud.create_lore(db_session, novel.id, "Calendar", "", "history")
    crud.create_lore(db_session, novel.id, "Basilisks", "", "creatures")
    assert [l.title for l in crud.get_lore(db_session, novel.id)] == ["Basilisks", "Dragons", "Calendar"]

def test_event_exists(db_session, novel, chapter):
    crud.create_event(db_session, novel.id, "Event 1", "The gate fell", chapter_id=chapter.id)
    assert crud.event_exists(db_session, novel.id, chapter.id, "The gate fell")
    assert not crud.event_exists(db_session, novel.id, chapter.id, "The gate stood")
    assert not crud.event_exists(db_session, novel.id, None, "The gate fell")

def test_deleting_chapter_keeps_its_events(db_session, novel, chapter):
    event = crud.create_event(db_session, novel.id, "Event 1", "The gate fell", chapter_id=chapter.id)
    assert crud.delete_chapter(db_session, chapter.id)
    db_session.expire_all()
    assert crud.get_event(db_session, event.id).chapter_id is None

def test_delete_novel_cascades(db_session, novel, chapter):
    crud.upsert_character(db_session, novel.id, "Mary")
    crud.create_note(db_session, novel.id, "Idea", "More dragons")
    crud.create_chapter_version(db_session, chapter, "Manual save")
    outline = crud.create_outline(db_session, novel.id, "Plan")
    crud.create_outline_section(db_session, outline.id, title="Act I")

    assert crud.delete_novel(db_session, novel.id)
    db_session.expire_all()
    for model in (models.Chapter, models.ChapterVersion, models.Character, models.Note,
                  models.Outline, models.OutlineSection):
        assert db_session.query(model).count() == 0

def test_ai_prompts_priority_order_and_contexts(db_session, novel):
    crud.create_ai_prompt(db_session, novel.id, "Tone", "style", "Keep it dry", priority=1)
    crud.create_ai_prompt(
        db_session, novel.id, "Mary voice", "character", "Mary speaks in short sentences",
        priority=5, contexts=[{"context_type": "character", "context_id": 1}]
    )
    crud.create_ai_prompt(db_session, novel.id, "Off", "style", "Unused", is_active=False, priority=10)

    prompts = crud.get_ai_prompts(db_session, novel.id)
    assert [p.name for p in prompts] == ["Off", "Mary voice", "Tone"]
    assert [p.name for p in crud.get_ai_prompts(db_session, novel.id, active_only=True)] == ["Mary voice", "Tone"]
    assert [(c.context_type, c.context_id) for c in prompts[1].contexts] == [("character", 1)]

def test_update_ai_prompt_replaces_contexts(db_session, novel):
    prompt = crud.create_ai_prompt(
        db_session, novel.id, "Tone", "style", "Keep it dry",
        contexts=[{"context_type": "global"}]
    )
    updated = crud.update_ai_prompt(
        db_session, prompt.id, "Tone", "style", "Keep it drier",
        contexts=[{"context_type": "chapter", "context_id": 3}]
    )
    assert updated.prompt_text == "Keep it drier"
    assert [(c.context_type, c.context_id) for c in updated.contexts] == [("chapter", 3)]
    assert db_session.query(models.AIPromptContext).count() == 1

def test_system_prompts_are_read_only(db_session, novel):
    prompt = crud.create_ai_prompt(db_session, novel.id, "Rules", "system", "Be plain", is_system=True)
    assert crud.update_ai_prompt(db_session, prompt.id, "Changed", "system", "Be fancy") is None
    assert crud.delete_ai_prompt(db_session, prompt.id) is False
    assert crud.get_ai_prompt(db_session, prompt.id).name == "Rules"

def test_deleting_section_removes_subsections(db_session, novel):
    outline = crud.create_outline(db_session, novel.id, "Plan")
    act = crud.create_outline_section(db_session, outline.id, title="Act I")
    crud.create_outline_section(db_session, outline.id, title="Scene 1", parent_id=act.id, level=1)
    assert crud.delete_outline_section(db_session, act.id)
    db_session.expire_all()
    assert crud.get_outline_sections(db_session, outline.id) == []
