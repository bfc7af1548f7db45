from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import get_novel_or_404
from db.database import get_db
from db import crud, models
from utils.errors import NotFoundError

router = APIRouter(tags=["notes"])

class NoteCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    content: Optional[str] = ""
    category: Optional[str] = ""

class NoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    novel_id: int
    title: str
    content: Optional[str] = None
    category: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

@router.get("/api/novels/{novel_id}/notes", response_model=List[NoteResponse])
async def list_notes(novel_id: int, db: Session = Depends(get_db)):
    return crud.get_notes(db, novel_id)

@router.post("/api/novels/{novel_id}/notes", response_model=NoteResponse)
async def create_note(
    note_data: NoteCreate,
    novel: models.Novel = Depends(get_novel_or_404),
    db: Session = Depends(get_db)
):
    return crud.create_note(db, novel.id, note_data.title, note_data.content, note_data.category)

@router.put("/api/notes/{note_id}", response_model=NoteResponse)
async def update_note(note_id: int, note_data: NoteCreate, db: Session = Depends(get_db)):
    db_note = crud.update_note(db, note_id, note_data.title, note_data.content, note_data.category)
    if not db_note:
        raise NotFoundError("Note", note_id)
    return db_note

@router.delete("/api/notes/{note_id}")
async def delete_note(note_id: int, db: Session = Depends(get_db)):
    if not crud.delete_note(db, note_id):
        raise NotFoundError("Note", note_id)
    return {"success": True}
