"""
Novel export in JSON, Markdown, plain text and HTML.

Chapter content is stored as the HTML produced by the editor. Markdown and
plain text exports flatten it with BeautifulSoup; the HTML export embeds it
as is.
"""

import html
import re
import textwrap
from datetime import datetime, timezone
from typing import Any, Dict, List

from bs4 import BeautifulSoup
from sqlalchemy.inspection import inspect as sa_inspect
from sqlalchemy.orm import Session

from db import crud, models
from utils.errors import NotFoundError, UnsupportedFormatError

SUPPORTED_FORMATS = {
    "markdown": ("text/markdown", "md"),
    "txt": ("text/plain", "txt"),
    "html": ("text/html", "html"),
}

_BLOCK_TAGS = ["p", "div", "br", "h1", "h2", "h3", "h4", "h5", "h6", "li", "blockquote"]

def row_to_dict(row) -> Dict[str, Any]:
    return {column.key: getattr(row, column.key) for column in sa_inspect(row).mapper.column_attrs}

def export_filename(title: str) -> str:
    return re.sub(r"[^a-zA-Z0-9]", "_", title)

def html_to_text(content: str, wrap_width: int = 0) -> str:
    """
    Flatten editor HTML to text, one paragraph per block element.

    Args:
        content: Chapter HTML (plain text passes through unchanged)
        wrap_width: Wrap paragraphs at this many columns, 0 to disable
    """
    soup = BeautifulSoup(content, "html.parser")
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for block in soup.find_all(_BLOCK_TAGS):
        block.insert_after("\n")

    paragraphs = [line.strip() for line in soup.get_text().splitlines()]
    paragraphs = [line for line in paragraphs if line]
    if wrap_width:
        paragraphs = [textwrap.fill(line, width=wrap_width) for line in paragraphs]
    return "\n\n".join(paragraphs)

def export_bundle(db: Session, novel_id: int) -> Dict[str, Any]:
    """Everything stored for a novel, ready for JSON serialization."""
    novel = crud.get_novel(db, novel_id)
    if not novel:
        raise NotFoundError("Novel", novel_id)

    return {
        "novel": row_to_dict(novel),
        "chapters": [row_to_dict(row) for row in crud.get_chapters(db, novel_id)],
        "characters": [row_to_dict(row) for row in crud.get_characters(db, novel_id)],
        "places": [row_to_dict(row) for row in crud.get_places(db, novel_id)],
        "events": [row_to_dict(row) for row in crud.get_events(db, novel_id)],
        "lore": [row_to_dict(row) for row in crud.get_lore(db, novel_id)],
        "items": [row_to_dict(row) for row in crud.get_items(db, novel_id)],
        "exported_at": datetime.now(timezone.utc).isoformat(),
    }

def render_markdown(novel: models.Novel, chapters: List[models.Chapter]) -> str:
    content = f"# {novel.title}\n\n"
    if novel.description:
        content += f"{novel.description}\n\n"
    content += "---\n\n"

    for chapter in chapters:
        content += f"## {chapter.title}\n\n"
        if chapter.content:
            content += f"{html_to_text(chapter.content)}\n\n"
    return content

def render_plain_text(novel: models.Novel, chapters: List[models.Chapter]) -> str:
    content = f"{novel.title}\n{'=' * len(novel.title)}\n\n"
    if novel.description:
        content += f"{novel.description}\n\n"

    for index, chapter in enumerate(chapters, start=1):
        heading = f"Chapter {index}: {chapter.title}"
        content += f"{heading}\n{'-' * len(heading)}\n\n"
        if chapter.content:
            content += f"{html_to_text(chapter.content, wrap_width=80)}\n\n"
    return content

def render_html(novel: models.Novel, chapters: List[models.Chapter]) -> str:
    title = html.escape(novel.title)
    parts = [f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>
        body {{ font-family: Georgia, serif; max-width: 800px; margin: 0 auto; padding: 20px; line-height: 1.6; }}
        h1 {{ border-bottom: 2px solid #333; padding-bottom: 10px; }}
        h2 {{ margin-top: 40px; color: #444; }}
        .description {{ font-style: italic; color: #666; margin-bottom: 30px; padding: 20px; background: #f5f5f5; }}
        .chapter {{ margin-bottom: 50px; }}
        .chapter-content {{ text-align: justify; }}
    </style>
</head>
<body>
    <h1>{title}</h1>"""]

    if novel.description:
        parts.append(f'    <div class="description">{html.escape(novel.description)}</div>')

    for chapter in chapters:
        parts.append(f"""    <div class="chapter">
        <h2>{html.escape(chapter.title)}</h2>
        <div class="chapter-content">
            {chapter.content or '<p>No content</p>'}
        </div>
    </div>""")

    parts.append("</body>\n</html>")
    return "\n".join(parts)

RENDERERS = {
    "markdown": render_markdown,
    "txt": render_plain_text,
    "html": render_html,
}

def export_novel(db: Session, novel_id: int, export_format: str) -> Dict[str, str]:
    """
    Render a novel's chapters in ``export_format``.

    Returns:
        Dict with ``content``, ``media_type`` and ``filename``

    Raises:
        NotFoundError: If the novel does not exist
        UnsupportedFormatError: If the format is not markdown, txt or html
    """
    novel = crud.get_novel(db, novel_id)
    if not novel:
        raise NotFoundError("Novel", novel_id)

    key = export_format.lower()
    if key not in RENDERERS:
        raise UnsupportedFormatError("Unsupported format. Use: markdown, txt, or html")

    media_type, extension = SUPPORTED_FORMATS[key]
    return {
        "content": RENDERERS[key](novel, crud.get_chapters(db, novel_id)),
        "media_type": media_type,
        "filename": f"{export_filename(novel.title)}.{extension}",
    }
