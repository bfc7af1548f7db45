from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import get_novel_or_404
from db.database import get_db
from db import crud, models
from utils.errors import NotFoundError

router = APIRouter(tags=["characters"])

class CharacterCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=300)
    description: Optional[str] = ""
    traits: Optional[str] = ""

class CharacterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    novel_id: int
    name: str
    description: Optional[str] = None
    traits: Optional[str] = None
    created_at: Optional[datetime] = None
    created: Optional[bool] = None

@router.get("/api/novels/{novel_id}/characters", response_model=List[CharacterResponse])
async def list_characters(novel_id: int, db: Session = Depends(get_db)):
    return crud.get_characters(db, novel_id)

@router.post("/api/novels/{novel_id}/characters", response_model=CharacterResponse)
async def create_character(
    character_data: CharacterCreate,
    novel: models.Novel = Depends(get_novel_or_404),
    db: Session = Depends(get_db)
):
    """Create a character; a character with the same name is returned as is with created=false"""
    db_character, created = crud.upsert_character(
        db, novel.id, character_data.name, character_data.description, character_data.traits
    )
    response = CharacterResponse.model_validate(db_character)
    response.created = created
    return response

@router.put("/api/characters/{character_id}", response_model=CharacterResponse)
async def update_character(character_id: int, character_data: CharacterCreate, db: Session = Depends(get_db)):
    db_character = crud.update_character(
        db, character_id, character_data.name, character_data.description, character_data.traits
    )
    if not db_character:
        raise NotFoundError("Character", character_id)
    return db_character

@router.delete("/api/characters/{character_id}")
async def delete_character(character_id: int, db: Session = Depends(get_db)):
    if not crud.delete_character(db, character_id):
        raise NotFoundError("Character", character_id)
    return {"success": True}
