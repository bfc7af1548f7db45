from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import get_novel_or_404
from db.database import get_db
from db import crud, models
from services import outline_service
from utils.errors import NotFoundError, ValidationError

router = APIRouter(tags=["outlines"])

class OutlineCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    description: Optional[str] = Field("", max_length=1000)

class OutlineFromChapters(BaseModel):
    title: Optional[str] = Field(None, max_length=300)

class OutlineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    novel_id: int
    title: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class SectionCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    description: Optional[str] = Field("", max_length=1000)
    content: Optional[str] = Field("", max_length=10000)
    order_index: int = 0
    parent_id: Optional[int] = None
    level: int = 0
    chapter_id: Optional[int] = None

class SectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    outline_id: int
    title: str
    description: Optional[str] = None
    content: Optional[str] = None
    order_index: int
    parent_id: Optional[int] = None
    level: int
    chapter_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class OutlineDetail(OutlineResponse):
    sections: List[SectionResponse] = []
    formatted: str = ""

def _outline_or_404(db: Session, outline_id: int) -> models.Outline:
    db_outline = crud.get_outline(db, outline_id)
    if not db_outline:
        raise NotFoundError("Outline", outline_id)
    return db_outline

def _check_parent(db: Session, outline_id: int, parent_id: Optional[int]) -> None:
    if parent_id is None:
        return
    parent = crud.get_outline_section(db, parent_id)
    if not parent or parent.outline_id != outline_id:
        raise ValidationError("Parent section must belong to the same outline")

@router.get("/api/novels/{novel_id}/outlines", response_model=List[OutlineResponse])
async def list_outlines(novel_id: int, db: Session = Depends(get_db)):
    return crud.get_outlines(db, novel_id)

@router.post("/api/novels/{novel_id}/outlines", response_model=OutlineResponse, status_code=status.HTTP_201_CREATED)
async def create_outline(
    outline_data: OutlineCreate,
    novel: models.Novel = Depends(get_novel_or_404),
    db: Session = Depends(get_db)
):
    return crud.create_outline(db, novel.id, outline_data.title, outline_data.description)

@router.post("/api/novels/{novel_id}/outlines/from-chapters", response_model=OutlineDetail, status_code=status.HTTP_201_CREATED)
async def create_outline_from_chapters(
    novel_id: int,
    outline_data: Optional[OutlineFromChapters] = None,
    db: Session = Depends(get_db)
):
    """Start an outline with one section per chapter"""
    title = outline_data.title if outline_data else None
    db_outline = outline_service.create_outline_from_chapters(db, novel_id, title)
    return _outline_detail(db, db_outline)

def _outline_detail(db: Session, db_outline: models.Outline) -> Dict[str, Any]:
    sections = crud.get_outline_sections(db, db_outline.id)
    detail = OutlineResponse.model_validate(db_outline).model_dump()
    detail["sections"] = sections
    detail["formatted"] = outline_service.format_outline(db_outline, sections)
    return detail

@router.get("/api/outlines/{outline_id}", response_model=OutlineDetail)
async def get_outline(outline_id: int, db: Session = Depends(get_db)):
    return _outline_detail(db, _outline_or_404(db, outline_id))

@router.put("/api/outlines/{outline_id}", response_model=OutlineResponse)
async def update_outline(outline_id: int, outline_data: OutlineCreate, db: Session = Depends(get_db)):
    db_outline = crud.update_outline(db, outline_id, outline_data.title, outline_data.description)
    if not db_outline:
        raise NotFoundError("Outline", outline_id)
    return db_outline

@router.delete("/api/outlines/{outline_id}")
async def delete_outline(outline_id: int, db: Session = Depends(get_db)):
    if not crud.delete_outline(db, outline_id):
        raise NotFoundError("Outline", outline_id)
    return {"success": True}

@router.get("/api/outlines/{outline_id}/tree")
async def get_outline_tree(outline_id: int, db: Session = Depends(get_db)):
    """Sections nested under their parents, each with a ``children`` list"""
    _outline_or_404(db, outline_id)
    return outline_service.build_section_tree(crud.get_outline_sections(db, outline_id))

@router.get("/api/outlines/{outline_id}/sections", response_model=List[SectionResponse])
async def list_sections(outline_id: int, db: Session = Depends(get_db)):
    return crud.get_outline_sections(db, outline_id)

@router.post("/api/outlines/{outline_id}/sections", response_model=SectionResponse, status_code=status.HTTP_201_CREATED)
async def create_section(outline_id: int, section_data: SectionCreate, db: Session = Depends(get_db)):
    _outline_or_404(db, outline_id)
    _check_parent(db, outline_id, section_data.parent_id)
    return crud.create_outline_section(db, outline_id, **section_data.model_dump())

@router.get("/api/sections/{section_id}", response_model=SectionResponse)
async def get_section(section_id: int, db: Session = Depends(get_db)):
    db_section = crud.get_outline_section(db, section_id)
    if not db_section:
        raise NotFoundError("Section", section_id)
    return db_section

@router.put("/api/sections/{section_id}", response_model=SectionResponse)
async def update_section(section_id: int, section_data: SectionCreate, db: Session = Depends(get_db)):
    db_section = crud.get_outline_section(db, section_id)
    if not db_section:
        raise NotFoundError("Section", section_id)
    if section_data.parent_id == section_id:
        raise ValidationError("A section cannot be its own parent")
    _check_parent(db, db_section.outline_id, section_data.parent_id)
    return crud.update_outline_section(db, section_id, **section_data.model_dump())

@router.delete("/api/sections/{section_id}")
async def delete_section(section_id: int, db: Session = Depends(get_db)):
    """Delete a section and, through the parent foreign key, all of its subsections"""
    if not crud.delete_outline_section(db, section_id):
        raise NotFoundError("Section", section_id)
    return {"success": True}
