from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import get_novel_or_404
from db.database import get_db
from db import crud, models
from services import chapter_versions
from utils.errors import NotFoundError

router = APIRouter(tags=["chapters"])

class ChapterCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    content: Optional[str] = ""
    order_index: int = 0

class ChapterUpdate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    content: Optional[str] = ""
    saveVersion: bool = False
    versionNote: Optional[str] = Field("", max_length=1000)

class ChapterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    novel_id: int
    title: str
    content: Optional[str] = None
    order_index: int
    word_count: Optional[int] = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class VersionCreate(BaseModel):
    versionNote: Optional[str] = Field(None, max_length=1000)

class VersionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    chapter_id: int
    title: str
    content: Optional[str] = None
    word_count: Optional[int] = 0
    version_note: Optional[str] = None
    created_at: Optional[datetime] = None

@router.get("/api/novels/{novel_id}/chapters", response_model=List[ChapterResponse])
async def list_chapters(novel_id: int, db: Session = Depends(get_db)):
    return crud.get_chapters(db, novel_id)

@router.post("/api/novels/{novel_id}/chapters", response_model=ChapterResponse)
async def create_chapter(
    chapter_data: ChapterCreate,
    novel: models.Novel = Depends(get_novel_or_404),
    db: Session = Depends(get_db)
):
    return crud.create_chapter(db, novel.id, chapter_data.title, chapter_data.content, chapter_data.order_index)

@router.get("/api/chapters/{chapter_id}", response_model=ChapterResponse)
async def get_chapter(chapter_id: int, db: Session = Depends(get_db)):
    db_chapter = crud.get_chapter(db, chapter_id)
    if not db_chapter:
        raise NotFoundError("Chapter", chapter_id)
    return db_chapter

@router.put("/api/chapters/{chapter_id}", response_model=ChapterResponse)
async def update_chapter(chapter_id: int, chapter_data: ChapterUpdate, db: Session = Depends(get_db)):
    """
    Save chapter text.

    The previous text is kept as a version when ``saveVersion`` is set or
    when the word count changes a lot.
    """
    return chapter_versions.update_chapter(
        db,
        chapter_id,
        chapter_data.title,
        chapter_data.content,
        save_version=chapter_data.saveVersion,
        version_note=chapter_data.versionNote
    )

@router.delete("/api/chapters/{chapter_id}")
async def delete_chapter(chapter_id: int, db: Session = Depends(get_db)):
    if not crud.delete_chapter(db, chapter_id):
        raise NotFoundError("Chapter", chapter_id)
    return {"success": True}

@router.get("/api/chapters/{chapter_id}/versions", response_model=List[VersionResponse])
async def list_versions(chapter_id: int, db: Session = Depends(get_db)):
    return crud.get_chapter_versions(db, chapter_id)

@router.post("/api/chapters/{chapter_id}/versions")
async def create_version(chapter_id: int, version_data: Optional[VersionCreate] = None, db: Session = Depends(get_db)):
    note = version_data.versionNote if version_data else None
    db_version = chapter_versions.save_version(db, chapter_id, note)
    return {"id": db_version.id, "success": True, "message": "Version saved successfully"}

@router.get("/api/versions/{version_id}", response_model=VersionResponse)
async def get_version(version_id: int, db: Session = Depends(get_db)):
    db_version = crud.get_chapter_version(db, version_id)
    if not db_version:
        raise NotFoundError("Version", version_id)
    return db_version

@router.post("/api/chapters/{chapter_id}/restore/{version_id}")
async def restore_version(chapter_id: int, version_id: int, db: Session = Depends(get_db)):
    chapter_versions.restore_version(db, chapter_id, version_id)
    return {"success": True, "message": "Version restored successfully"}
