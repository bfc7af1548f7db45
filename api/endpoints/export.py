from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from api.dependencies import get_novel_or_404
from db.database import get_db
from db import models
from services import export as export_service

router = APIRouter(
    prefix="/api/novels/{novel_id}/export",
    tags=["export"],
)

@router.get("")
async def export_json(novel: models.Novel = Depends(get_novel_or_404), db: Session = Depends(get_db)):
    """Download everything stored for a novel as one JSON document"""
    bundle = export_service.export_bundle(db, novel.id)
    filename = f"{export_service.export_filename(novel.title)}_export.json"
    return JSONResponse(
        content=jsonable_encoder(bundle),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )

@router.get("/{export_format}")
async def export_document(export_format: str, novel_id: int, db: Session = Depends(get_db)):
    """Download the novel's chapters as markdown, txt or html"""
    exported = export_service.export_novel(db, novel_id, export_format)
    return Response(
        content=exported["content"],
        media_type=exported["media_type"],
        headers={"Content-Disposition": f'attachment; filename="{exported["filename"]}"'}
    )
