import pytest

from db import crud, models
from services import chapter_analysis, chapter_versions, export, outline_service, prompt_guidelines
from utils.errors import NotFoundError, UnsupportedFormatError, ValidationError

class TestChapterAnalysis:
    """Storing analyzer results in the novel."""

    def test_analysis_stores_elements(self, db_session, novel, chapter):
        result = chapter_analysis.analyze_chapter(db_session, chapter.id)

        assert [c.name for c in result.characters] == ["Mary", "John"]
        characters = crud.get_characters(db_session, novel.id)
        assert sorted(c.name for c in characters) == ["John", "Mary"]
        assert all(c.description == "Appeared in chapter: Arrival" for c in characters)

        places = crud.get_places(db_session, novel.id)
        assert [p.name for p in places] == ["Silver Gate"]
        assert "arrived at the Silver Gate" in places[0].description

        events = crud.get_events(db_session, novel.id)
        assert [(e.title, e.description, e.chapter_id) for e in events] == [
            ("Event 1", "They arrived at the Silver Gate", chapter.id)
        ]

        items = [i.name for i in crud.get_items(db_session, novel.id)]
        assert "ancient sword" in items

    def test_reanalysis_adds_nothing(self, db_session, novel, chapter):
        chapter_analysis.analyze_chapter(db_session, chapter.id)
        counts = (
            len(crud.get_characters(db_session, novel.id)),
            len(crud.get_places(db_session, novel.id)),
            len(crud.get_events(db_session, novel.id)),
            len(crud.get_items(db_session, novel.id)),
        )
        chapter_analysis.analyze_chapter(db_session, chapter.id)
        assert counts == (
            len(crud.get_characters(db_session, novel.id)),
            len(crud.get_places(db_session, novel.id)),
            len(crud.get_events(db_session, novel.id)),
            len(crud.get_items(db_session, novel.id)),
        )

    def test_existing_elements_are_left_alone(self, db_session, novel, chapter):
        crud.upsert_character(db_session, novel.id, "Mary", "Written by hand", "brave")
        chapter_analysis.analyze_chapter(db_session, chapter.id)
        mary = crud.get_character_by_name(db_session, novel.id, "Mary")
        assert mary.description == "Written by hand"
        assert mary.traits == "brave"

    def test_missing_chapter(self, db_session):
        with pytest.raises(NotFoundError):
            chapter_analysis.analyze_chapter(db_session, 999)

class TestChapterVersions:
    """Version snapshots around chapter edits."""

    def test_needs_auto_version(self):
        long_text = " ".join(["word"] * 60)
        assert chapter_versions.needs_auto_version("a few words", long_text)
        assert not chapter_versions.needs_auto_version("a few words", "a few more words")
        assert not chapter_versions.needs_auto_version("", long_text)
        assert not chapter_versions.needs_auto_version(long_text, long_text)
        assert chapter_versions.needs_auto_version("one", "one two three", threshold=1)

    def test_small_edit_keeps_no_version(self, db_session, chapter):
        updated = chapter_versions.update_chapter(db_session, chapter.id, "Arrival", "Short now.")
        assert updated.content == "Short now."
        assert updated.word_count == 2
        assert crud.get_chapter_versions(db_session, chapter.id) == []

    def test_requested_version_keeps_previous_text(self, db_session, chapter):
        original = chapter.content
        chapter_versions.update_chapter(db_session, chapter.id, "Arrival", "New text", save_version=True, version_note="Draft 1")
        versions = crud.get_chapter_versions(db_session, chapter.id)
        assert [(v.content, v.version_note) for v in versions] == [(original, "Draft 1")]

    def test_large_edit_saves_version_automatically(self, db_session, chapter):
        chapter_versions.update_chapter(db_session, chapter.id, "Arrival", " ".join(["word"] * 200))
        versions = crud.get_chapter_versions(db_session, chapter.id)
        assert [v.version_note for v in versions] == [chapter_versions.AUTO_VERSION_NOTE]

    def test_manual_version_note(self, db_session, chapter):
        version = chapter_versions.save_version(db_session, chapter.id)
        assert version.version_note == chapter_versions.MANUAL_VERSION_NOTE
        assert version.word_count == chapter.word_count

    def test_restore_snapshots_current_text(self, db_session, chapter):
        original = chapter.content
        version = chapter_versions.save_version(db_session, chapter.id, "Before rewrite")
        chapter_versions.update_chapter(db_session, chapter.id, "Renamed", "Rewritten.")

        restored = chapter_versions.restore_version(db_session, chapter.id, version.id)
        assert restored.title == "Arrival"
        assert restored.content == original
        assert restored.word_count == version.word_count

        versions = crud.get_chapter_versions(db_session, chapter.id)
        assert versions[0].version_note == chapter_versions.RESTORE_VERSION_NOTE
        assert versions[0].content == "Rewritten."

    def test_restore_version_of_other_chapter(self, db_session, novel, chapter):
        other = crud.create_chapter(db_session, novel.id, "Other", "Elsewhere")
        version = chapter_versions.save_version(db_session, other.id)
        with pytest.raises(NotFoundError):
            chapter_versions.restore_version(db_session, chapter.id, version.id)

class TestOutlines:
    """Outline trees and outlines generated from chapters."""

    @pytest.fixture
    def outline(self, db_session, novel):
        outline = crud.create_outline(db_session, novel.id, "Plan")
        act_one = crud.create_outline_section(db_session, outline.id, title="Act I", description="Setup", order_index=0)
        crud.create_outline_section(db_session, outline.id, title="Act II", order_index=1)
        crud.create_outline_section(db_session, outline.id, title="Scene 2", parent_id=act_one.id, level=1, order_index=1)
        crud.create_outline_section(db_session, outline.id, title="Scene 1", parent_id=act_one.id, level=1, order_index=0)
        return outline

    def test_build_section_tree(self, db_session, outline):
        tree = outline_service.build_section_tree(crud.get_outline_sections(db_session, outline.id))
        assert [node["title"] for node in tree] == ["Act I", "Act II"]
        assert [node["title"] for node in tree[0]["children"]] == ["Scene 1", "Scene 2"]
        assert tree[1]["children"] == []

    def test_format_outline(self, db_session, outline):
        text = outline_service.format_outline(outline, crud.get_outline_sections(db_session, outline.id))
        assert text == (
            'STORY OUTLINE: "Plan"\n\n'
            "• Act I - Setup\n"
            "  • Scene 1\n"
            "  • Scene 2\n\n"
            "• Act II"
        )

    def test_format_empty_outline(self, db_session, novel):
        outline = crud.create_outline(db_session, novel.id, "Empty", "Nothing yet")
        assert outline_service.format_outline(outline, []) == (
            'STORY OUTLINE: "Empty"\n\nDescription: Nothing yet\n\nNo sections in outline'
        )

    def test_outline_from_chapters(self, db_session, novel):
        crud.create_chapter(db_session, novel.id, "Two", "short", order_index=2)
        crud.create_chapter(db_session, novel.id, "One", "x" * 250, order_index=1)

        outline = outline_service.create_outline_from_chapters(db_session, novel.id)
        assert outline.title == outline_service.DEFAULT_OUTLINE_TITLE
        assert outline.description == "Auto-generated from 2 chapters"

        sections = crud.get_outline_sections(db_session, outline.id)
        assert [s.title for s in sections] == ["One", "Two"]
        assert sections[0].description == "Chapter 1 (1 words)"
        assert sections[0].content == "x" * 200 + "..."
        assert sections[1].content == "short"
        assert all(s.level == 0 and s.parent_id is None and s.chapter_id for s in sections)

    def test_outline_from_chapters_needs_chapters(self, db_session, novel):
        with pytest.raises(ValidationError):
            outline_service.create_outline_from_chapters(db_session, novel.id, "Plan")

class TestPromptGuidelines:
    """Combining active prompts into one system prompt."""

    def test_no_prompts(self, db_session, novel):
        assert prompt_guidelines.build_system_prompt([]) == ""
        assert prompt_guidelines.guidelines_for_novel(db_session, novel.id) == {
            "system_prompt": "",
            "active_prompts": [],
        }

    def test_system_prompt_layout(self, db_session, novel):
        crud.create_ai_prompt(db_session, novel.id, "Tone", "style", "Keep it dry", priority=1)
        crud.create_ai_prompt(db_session, novel.id, "Voice", "character", "Short sentences", priority=2)
        crud.create_ai_prompt(db_session, novel.id, "Unused", "style", "Ignore", is_active=False)

        guidelines = prompt_guidelines.guidelines_for_novel(db_session, novel.id)
        assert guidelines["system_prompt"] == (
            "WRITING GUIDELINES:\n\n"
            "1. Voice (character):\nShort sentences\n\n"
            "2. Tone (style):\nKeep it dry\n\n"
            "Please follow these guidelines when responding.\n\n"
        )
        assert guidelines["active_prompts"] == [
            {"name": "Voice", "category": "character"},
            {"name": "Tone", "category": "style"},
        ]

    def test_seed_style_guide_once_per_novel(self, db_session, novel):
        assert prompt_guidelines.seed_style_guide(db_session) == {"added": 1, "updated": 0}
        assert prompt_guidelines.seed_style_guide(db_session) == {"added": 0, "updated": 0}

        prompts = crud.get_ai_prompts(db_session, novel.id)
        assert len(prompts) == 1
        assert prompts[0].is_system
        assert prompts[0].priority == prompt_guidelines.STYLE_GUIDE_PRIORITY
        assert prompts[0].category == prompt_guidelines.STYLE_GUIDE_CATEGORY

    def test_seed_refreshes_stale_text(self, db_session, novel):
        prompt_guidelines.seed_style_guide(db_session)
        prompt = db_session.query(models.AIPrompt).one()
        prompt.prompt_text = "old"
        db_session.commit()

        assert prompt_guidelines.seed_style_guide(db_session) == {"added": 0, "updated": 1}
        db_session.refresh(prompt)
        assert prompt.prompt_text == prompt_guidelines.STYLE_GUIDE_PROMPT

class TestExport:
    """Rendering a novel for download."""

    def test_html_to_text(self):
        assert export.html_to_text("<p>One</p><p>Two<br>Three</p>") == "One\n\nTwo\n\nThree"
        assert export.html_to_text("Just words") == "Just words"

    def test_export_filename(self):
        assert export.export_filename("The Long Road: Part 2") == "The_Long_Road__Part_2"

    def test_markdown(self, db_session, novel):
        crud.create_chapter(db_session, novel.id, "Arrival", "<p>It rained.</p>")
        exported = export.export_novel(db_session, novel.id, "markdown")
        assert exported["media_type"] == "text/markdown"
        assert exported["filename"] == "The_Long_Road.md"
        assert exported["content"] == "# The Long Road\n\nA journey north\n\n---\n\n## Arrival\n\nIt rained.\n\n"

    def test_plain_text(self, db_session, novel):
        crud.create_chapter(db_session, novel.id, "Arrival", "<p>" + "word " * 30 + "</p>")
        content = export.export_novel(db_session, novel.id, "TXT")["content"]
        assert content.startswith("The Long Road\n=============\n\nA journey north\n\n")
        assert "Chapter 1: Arrival\n------------------\n\n" in content
        assert all(len(line) <= 80 for line in content.splitlines())

    def test_html_escapes_title(self, db_session):
        novel = crud.create_novel(db_session, "<Tom & Jerry>")
        crud.create_chapter(db_session, novel.id, "Empty", "")
        content = export.export_novel(db_session, novel.id, "html")["content"]
        assert "<title>&lt;Tom &amp; Jerry&gt;</title>" in content
        assert "<p>No content</p>" in content

    def test_unsupported_format(self, db_session, novel):
        with pytest.raises(UnsupportedFormatError, match="Unsupported format"):
            export.export_novel(db_session, novel.id, "pdf")

    def test_bundle(self, db_session, novel, chapter):
        crud.upsert_character(db_session, novel.id, "Mary")
        bundle = export.export_bundle(db_session, novel.id)
        assert bundle["novel"]["title"] == "The Long Road"
        assert [c["title"] for c in bundle["chapters"]] == ["Arrival"]
        assert [c["name"] for c in bundle["characters"]] == ["Mary"]
        assert set(bundle) == {"novel", "chapters", "characters", "places", "events", "lore", "items", "exported_at"}
