from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from auth import get_current_user
from db import get_db
import dao, match, models, schemas

router = APIRouter(prefix="/api/messages", tags=["Messages"])


@router.get("/{match_id}", response_model=list[schemas.MessageOut])
def get_messages(
    match_id: int,
    current_user: models.Profile = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    existing = dao.get_match(db, match_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Match not found")

    if not existing.has_member(current_user.id) and not current_user.is_admin:
        raise HTTPException(status_code=403, detail="You are not part of this match")

    return dao.list_messages(db, match_id)


@router.post("", response_model=schemas.MessageOut, status_code=status.HTTP_201_CREATED)
def send_message(
    message: schemas.MessageIn,
    current_user: models.Profile = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if current_user.id != message.sender_id:
        raise HTTPException(status_code=403, detail="Identity mismatch")

    try:
        return match.post_message(db, message.match_id, message.sender_id, message.content)
    except match.MatchNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except match.AuthorizationMismatch as e:
        raise HTTPException(status_code=403, detail=str(e))
