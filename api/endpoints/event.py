from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import get_novel_or_404
from db.database import get_db
from db import crud, models
from utils.errors import NotFoundError

router = APIRouter(tags=["events"])

class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = ""
    chapter_id: Optional[int] = None

class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    novel_id: int
    title: str
    description: Optional[str] = None
    chapter_id: Optional[int] = None
    created_at: Optional[datetime] = None

@router.get("/api/novels/{novel_id}/events", response_model=List[EventResponse])
async def list_events(novel_id: int, db: Session = Depends(get_db)):
    return crud.get_events(db, novel_id)

@router.post("/api/novels/{novel_id}/events", response_model=EventResponse)
async def create_event(
    event_data: EventCreate,
    novel: models.Novel = Depends(get_novel_or_404),
    db: Session = Depends(get_db)
):
    return crud.create_event(db, novel.id, event_data.title, event_data.description, event_data.chapter_id)

@router.put("/api/events/{event_id}", response_model=EventResponse)
async def update_event(event_id: int, event_data: EventCreate, db: Session = Depends(get_db)):
    db_event = crud.update_event(db, event_id, event_data.title, event_data.description, event_data.chapter_id)
    if not db_event:
        raise NotFoundError("Event", event_id)
    return db_event

@router.delete("/api/events/{event_id}")
async def delete_event(event_id: int, db: Session = Depends(get_db)):
    if not crud.delete_event(db, event_id):
        raise NotFoundError("Event", event_id)
    return {"success": True}
