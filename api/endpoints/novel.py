from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import get_novel_or_404
from db.database import get_db
from db import crud, models
from utils.errors import NotFoundError
from utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/novels",
    tags=["novels"],
)

class NovelCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = Field("", max_length=5000)

class NovelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

@router.get("", response_model=List[NovelResponse])
async def list_novels(db: Session = Depends(get_db)):
    """List novels, most recently edited first"""
    return crud.get_novels(db)

@router.post("", response_model=NovelResponse)
async def create_novel(novel_data: NovelCreate, db: Session = Depends(get_db)):
    db_novel = crud.create_novel(db, novel_data.title, novel_data.description)
    logger.info(f"Created novel {db_novel.id}")
    return db_novel

@router.get("/{novel_id}", response_model=NovelResponse)
async def get_novel(novel: models.Novel = Depends(get_novel_or_404)):
    return novel

@router.put("/{novel_id}", response_model=NovelResponse)
async def update_novel(novel_id: int, novel_data: NovelCreate, db: Session = Depends(get_db)):
    db_novel = crud.update_novel(db, novel_id, novel_data.title, novel_data.description)
    if not db_novel:
        raise NotFoundError("Novel", novel_id)
    return db_novel

@router.delete("/{novel_id}")
async def delete_novel(novel_id: int, db: Session = Depends(get_db)):
    """Delete a novel together with everything that belongs to it"""
    if not crud.delete_novel(db, novel_id):
        raise NotFoundError("Novel", novel_id)
    logger.info(f"Deleted novel {novel_id}")
    return {"success": True}
