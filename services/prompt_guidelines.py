from sqlalchemy.orm import Session
from typing import Dict, List, Sequence

from db import crud, models
from db.session_manager import managed_db_transaction
from utils.logging import get_logger

logger = get_logger(__name__)

STYLE_GUIDE_NAME = "Anti-AI-isms Guidelines"
STYLE_GUIDE_CATEGORY = "system"
STYLE_GUIDE_PRIORITY = 100

STYLE_GUIDE_PROMPT = """# Anti-AI-isms Writing Guidelines

Avoid stock phrases that make prose read as machine-written.

## Formulaic transitions
- "It's worth noting that..."
- "In light of this..."
- "With that being said..."
- "Needless to say..."
- "At the end of the day..."

## Empty qualifiers and intensifiers
- "Truly remarkable", "Deeply meaningful", "Utterly fascinating"
- "Significantly enhance", "Dramatically reduce", "Carefully consider"

## Generic descriptors
- "Cutting-edge", "State-of-the-art", "Seamless", "Game-changing"

## Distance markers and pretension
- "One might argue...", "It could be said that...", "Undoubtedly..."
- "It is imperative to note...", "Upon careful examination..."

## Instead
1. Be specific: concrete details beat abstractions.
2. Prefer the active voice.
3. Cut words that add no meaning.
4. Connect ideas through their logic, not through stock transitions.
5. Read it aloud: would a person say this?
"""

def build_system_prompt(prompts: Sequence[models.AIPrompt]) -> str:
    """
    Join active prompts into the guideline block sent ahead of assistant requests.

    Returns an empty string when there are no prompts.
    """
    if not prompts:
        return ""

    parts = ["WRITING GUIDELINES:\n\n"]
    for index, prompt in enumerate(prompts, start=1):
        parts.append(f"{index}. {prompt.name} ({prompt.category}):\n{prompt.prompt_text}\n\n")
    parts.append("Please follow these guidelines when responding.\n\n")
    return "".join(parts)

def guidelines_for_novel(db: Session, novel_id: int) -> Dict[str, object]:
    prompts = crud.get_ai_prompts(db, novel_id, active_only=True)
    return {
        "system_prompt": build_system_prompt(prompts),
        "active_prompts": [{"name": prompt.name, "category": prompt.category} for prompt in prompts],
    }

def seed_style_guide(db: Session, novels: List[models.Novel] = None) -> Dict[str, int]:
    """
    Give every novel the read-only style guide prompt, refreshing its text where it already exists.

    Returns:
        Counts of prompts ``added`` and ``updated``
    """
    if novels is None:
        novels = crud.get_novels(db)

    counts = {"added": 0, "updated": 0}
    with managed_db_transaction(db) as tx_db:
        existing = (
            tx_db.query(models.AIPrompt)
            .filter(models.AIPrompt.name == STYLE_GUIDE_NAME, models.AIPrompt.is_system.is_(True))
            .all()
        )
        seeded_novels = set()
        for prompt in existing:
            if prompt.prompt_text != STYLE_GUIDE_PROMPT:
                prompt.prompt_text = STYLE_GUIDE_PROMPT
                counts["updated"] += 1
            seeded_novels.add(prompt.novel_id)

        for novel in novels:
            if novel.id in seeded_novels:
                continue
            tx_db.add(models.AIPrompt(
                novel_id=novel.id,
                name=STYLE_GUIDE_NAME,
                category=STYLE_GUIDE_CATEGORY,
                prompt_text=STYLE_GUIDE_PROMPT,
                is_active=True,
                is_system=True,
                priority=STYLE_GUIDE_PRIORITY
            ))
            counts["added"] += 1

    logger.info(f"Style guide prompt seeded: {counts}")
    return counts
