from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Literal, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import get_novel_or_404
from db.database import get_db
from db import crud, models
from services.prompt_guidelines import guidelines_for_novel
from utils.errors import NotFoundError

router = APIRouter(tags=["ai-prompts"])

class PromptContext(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    context_type: Literal["character", "chapter", "global"]
    context_id: Optional[int] = None

class AIPromptCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=300)
    category: str = Field(..., min_length=1, max_length=100)
    prompt_text: str = Field(..., min_length=1, max_length=10000)
    is_active: bool = True
    priority: int = 0
    contexts: List[PromptContext] = []

class AIPromptResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    novel_id: int
    name: str
    category: str
    prompt_text: str
    is_active: bool
    is_system: bool
    priority: int
    contexts: List[PromptContext] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class ActivePrompt(BaseModel):
    name: str
    category: str

class GuidelinesResponse(BaseModel):
    system_prompt: str
    active_prompts: List[ActivePrompt]

@router.get("/api/novels/{novel_id}/ai-prompts", response_model=List[AIPromptResponse])
async def list_ai_prompts(novel_id: int, db: Session = Depends(get_db)):
    return crud.get_ai_prompts(db, novel_id)

@router.get("/api/novels/{novel_id}/ai-prompts/active", response_model=List[AIPromptResponse])
async def list_active_ai_prompts(novel_id: int, db: Session = Depends(get_db)):
    return crud.get_ai_prompts(db, novel_id, active_only=True)

@router.get("/api/novels/{novel_id}/ai-prompts/guidelines", response_model=GuidelinesResponse)
async def get_guidelines(novel_id: int, db: Session = Depends(get_db)):
    """Active prompts combined into a single system prompt, highest priority first"""
    return guidelines_for_novel(db, novel_id)

@router.post("/api/novels/{novel_id}/ai-prompts", response_model=AIPromptResponse)
async def create_ai_prompt(
    prompt_data: AIPromptCreate,
    novel: models.Novel = Depends(get_novel_or_404),
    db: Session = Depends(get_db)
):
    return crud.create_ai_prompt(
        db,
        novel.id,
        prompt_data.name,
        prompt_data.category,
        prompt_data.prompt_text,
        is_active=prompt_data.is_active,
        priority=prompt_data.priority,
        contexts=[context.model_dump() for context in prompt_data.contexts]
    )

@router.put("/api/ai-prompts/{prompt_id}", response_model=AIPromptResponse)
async def update_ai_prompt(prompt_id: int, prompt_data: AIPromptCreate, db: Session = Depends(get_db)):
    db_prompt = crud.update_ai_prompt(
        db,
        prompt_id,
        prompt_data.name,
        prompt_data.category,
        prompt_data.prompt_text,
        is_active=prompt_data.is_active,
        priority=prompt_data.priority,
        contexts=[context.model_dump() for context in prompt_data.contexts]
    )
    if not db_prompt:
        raise NotFoundError("AI Prompt", prompt_id, message="AI Prompt not found or is system prompt")
    return db_prompt

@router.delete("/api/ai-prompts/{prompt_id}")
async def delete_ai_prompt(prompt_id: int, db: Session = Depends(get_db)):
    if not crud.delete_ai_prompt(db, prompt_id):
        raise NotFoundError("AI Prompt", prompt_id, message="AI Prompt not found or is system prompt")
    return {"success": True}
