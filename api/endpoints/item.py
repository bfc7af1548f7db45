from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import get_novel_or_404
from db.database import get_db
from db import crud, models
from utils.errors import NotFoundError

router = APIRouter(tags=["items"])

class ItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=300)
    description: Optional[str] = ""
    properties: Optional[str] = ""

class ItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    novel_id: int
    name: str
    description: Optional[str] = None
    properties: Optional[str] = None
    created_at: Optional[datetime] = None
    created: Optional[bool] = None

@router.get("/api/novels/{novel_id}/items", response_model=List[ItemResponse])
async def list_items(novel_id: int, db: Session = Depends(get_db)):
    return crud.get_items(db, novel_id)

@router.post("/api/novels/{novel_id}/items", response_model=ItemResponse)
async def create_item(
    item_data: ItemCreate,
    novel: models.Novel = Depends(get_novel_or_404),
    db: Session = Depends(get_db)
):
    db_item, created = crud.upsert_item(db, novel.id, item_data.name, item_data.description, item_data.properties)
    response = ItemResponse.model_validate(db_item)
    response.created = created
    return response

@router.put("/api/items/{item_id}", response_model=ItemResponse)
async def update_item(item_id: int, item_data: ItemCreate, db: Session = Depends(get_db)):
    db_item = crud.update_item(db, item_id, item_data.name, item_data.description, item_data.properties)
    if not db_item:
        raise NotFoundError("Item", item_id)
    return db_item

@router.delete("/api/items/{item_id}")
async def delete_item(item_id: int, db: Session = Depends(get_db)):
    if not crud.delete_item(db, item_id):
        raise NotFoundError("Item", item_id)
    return {"success": True}
