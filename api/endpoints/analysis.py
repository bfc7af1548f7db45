from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
from pydantic import BaseModel

from db.database import get_db
from services import chapter_analysis
from services.analyzer import analyze

router = APIRouter(
    tags=["analysis"],
    responses={404: {"description": "Chapter not found"}}
)

class AnalyzeTextRequest(BaseModel):
    text: Optional[str] = ""

class AnalysisResponse(BaseModel):
    success: bool
    analysis: Dict[str, List[Dict[str, Any]]]

@router.post("/api/chapters/{chapter_id}/analyze", response_model=AnalysisResponse)
async def analyze_chapter(
    chapter_id: int = Path(..., description="ID of the chapter to analyze"),
    db: Session = Depends(get_db)
):
    """
    Extract characters, places, events and items from a chapter and add them to its novel.

    Elements already stored under the same name are left unchanged.
    """
    analysis = chapter_analysis.analyze_chapter(db, chapter_id)
    return {"success": True, "analysis": analysis.to_dict()}

@router.post("/api/analyze", response_model=AnalysisResponse)
async def analyze_text(request: AnalyzeTextRequest):
    """Preview what the analyzer finds in arbitrary text without storing anything"""
    return {"success": True, "analysis": analyze(request.text).to_dict()}
