from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import get_novel_or_404
from db.database import get_db
from db import crud, models
from utils.errors import NotFoundError

router = APIRouter(tags=["places"])

class PlaceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=300)
    description: Optional[str] = ""

class PlaceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    novel_id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    created: Optional[bool] = None

@router.get("/api/novels/{novel_id}/places", response_model=List[PlaceResponse])
async def list_places(novel_id: int, db: Session = Depends(get_db)):
    return crud.get_places(db, novel_id)

@router.post("/api/novels/{novel_id}/places", response_model=PlaceResponse)
async def create_place(
    place_data: PlaceCreate,
    novel: models.Novel = Depends(get_novel_or_404),
    db: Session = Depends(get_db)
):
    db_place, created = crud.upsert_place(db, novel.id, place_data.name, place_data.description)
    response = PlaceResponse.model_validate(db_place)
    response.created = created
    return response

@router.put("/api/places/{place_id}", response_model=PlaceResponse)
async def update_place(place_id: int, place_data: PlaceCreate, db: Session = Depends(get_db)):
    db_place = crud.update_place(db, place_id, place_data.name, place_data.description)
    if not db_place:
        raise NotFoundError("Place", place_id)
    return db_place

@router.delete("/api/places/{place_id}")
async def delete_place(place_id: int, db: Session = Depends(get_db)):
    if not crud.delete_place(db, place_id):
        raise NotFoundError("Place", place_id)
    return {"success": True}
