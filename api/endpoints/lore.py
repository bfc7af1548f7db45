from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import get_novel_or_404
from db.database import get_db
from db import crud, models
from utils.errors import NotFoundError

router = APIRouter(tags=["lore"])

class LoreCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    content: Optional[str] = ""
    category: Optional[str] = ""

class LoreResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    novel_id: int
    title: str
    content: Optional[str] = None
    category: Optional[str] = None
    created_at: Optional[datetime] = None

@router.get("/api/novels/{novel_id}/lore", response_model=List[LoreResponse])
async def list_lore(novel_id: int, db: Session = Depends(get_db)):
    """Lore entries grouped by category, then by title"""
    return crud.get_lore(db, novel_id)

@router.post("/api/novels/{novel_id}/lore", response_model=LoreResponse)
async def create_lore(
    lore_data: LoreCreate,
    novel: models.Novel = Depends(get_novel_or_404),
    db: Session = Depends(get_db)
):
    return crud.create_lore(db, novel.id, lore_data.title, lore_data.content, lore_data.category)

@router.put("/api/lore/{lore_id}", response_model=LoreResponse)
async def update_lore(lore_id: int, lore_data: LoreCreate, db: Session = Depends(get_db)):
    db_lore = crud.update_lore(db, lore_id, lore_data.title, lore_data.content, lore_data.category)
    if not db_lore:
        raise NotFoundError("Lore", lore_id)
    return db_lore

@router.delete("/api/lore/{lore_id}")
async def delete_lore(lore_id: int, db: Session = Depends(get_db)):
    if not crud.delete_lore(db, lore_id):
        raise NotFoundError("Lore", lore_id)
    return {"success": True}
