from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from app import crud
from app.api import deps
from app.core.exceptions import NotFoundError
from app.db.database import get_db
from app.models.user import User
from app.services.image_storage import ImageStore

router = APIRouter()


@router.get("/{key:path}")
def get_image(
    key: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
    image_store: ImageStore = Depends(deps.get_image_store),
) -> Response:
    """Stream back a stored signature or photo."""
    if not crud.participant.owns_image(db, key=key, owner_id=current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    try:
        image = image_store.get(key)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    return Response(content=image.data, media_type=image.content_type)
