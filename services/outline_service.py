from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional

from db import crud, models
from db.session_manager import managed_db_transaction
from utils.errors import NotFoundError, ValidationError
from utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_OUTLINE_TITLE = "Generated Outline"
SECTION_PREVIEW_CHARS = 200

def section_to_dict(section: models.OutlineSection) -> Dict[str, Any]:
    return {
        "id": section.id,
        "outline_id": section.outline_id,
        "title": section.title,
        "description": section.description,
        "content": section.content,
        "order_index": section.order_index,
        "parent_id": section.parent_id,
        "level": section.level,
        "chapter_id": section.chapter_id,
        "created_at": section.created_at,
        "updated_at": section.updated_at,
    }

def build_section_tree(sections: List[models.OutlineSection], parent_id: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Nest flat sections under their parents.

    Siblings are ordered by ``order_index``. Sections whose parent is not in
    ``sections`` are unreachable and left out.
    """
    children = sorted(
        (section for section in sections if section.parent_id == parent_id),
        key=lambda section: (section.order_index, section.id)
    )
    tree = []
    for section in children:
        node = section_to_dict(section)
        node["children"] = build_section_tree(sections, section.id)
        tree.append(node)
    return tree

def format_outline(outline: models.Outline, sections: List[models.OutlineSection]) -> str:
    """Render an outline as an indented bullet list for pasting into an assistant chat."""
    header = f'STORY OUTLINE: "{outline.title}"\n\n'
    if outline.description:
        header += f"Description: {outline.description}\n\n"

    def render(nodes: List[Dict[str, Any]]) -> List[str]:
        blocks = []
        for node in nodes:
            bullet = f"{'  ' * node['level']}• {node['title']}"
            if node["description"]:
                bullet += f" - {node['description']}"
            child_lines = render(node["children"])
            blocks.append("\n".join([bullet] + child_lines) if child_lines else bullet)
        return blocks

    top_level = render(build_section_tree(sections))
    body = "\n\n".join(top_level) if top_level else "No sections in outline"
    return header + body

def create_outline_from_chapters(db: Session, novel_id: int, title: Optional[str] = None) -> models.Outline:
    """
    Create an outline with one top-level section per chapter, in chapter order.

    Raises:
        NotFoundError: If the novel does not exist
        ValidationError: If the novel has no chapters
    """
    if not crud.get_novel(db, novel_id):
        raise NotFoundError("Novel", novel_id)

    chapters = crud.get_chapters(db, novel_id)
    if not chapters:
        raise ValidationError("No chapters found to create outline from")

    with managed_db_transaction(db) as tx_db:
        outline = crud.create_outline(
            tx_db, novel_id, title or DEFAULT_OUTLINE_TITLE,
            description=f"Auto-generated from {len(chapters)} chapters",
            commit=False
        )
        for index, chapter in enumerate(chapters):
            content = chapter.content or ""
            if len(content) > SECTION_PREVIEW_CHARS:
                content = content[:SECTION_PREVIEW_CHARS] + "..."
            crud.create_outline_section(
                tx_db, outline.id, commit=False,
                title=chapter.title,
                description=f"Chapter {index + 1} ({crud.count_words(chapter.content)} words)",
                content=content,
                order_index=index,
                parent_id=None,
                level=0,
                chapter_id=chapter.id
            )

    logger.info(f"Created outline {outline.id} from {len(chapters)} chapters of novel {novel_id}")
    db.refresh(outline)
    return outline
