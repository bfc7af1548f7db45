from fastapi import Depends, Path
from sqlalchemy.orm import Session

from db.database import get_db
from db import crud, models
from utils.errors import NotFoundError

def get_novel_or_404(
    novel_id: int = Path(..., description="ID of the novel"),
    db: Session = Depends(get_db)
) -> models.Novel:
    """Resolve the novel in the URL, raising NotFoundError (HTTP 404) when it is missing."""
    novel = crud.get_novel(db, novel_id)
    if not novel:
        raise NotFoundError("Novel", novel_id)
    return novel
