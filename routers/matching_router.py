from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from auth import get_current_user
from db import get_db
import dao, feed, match, models, schemas

# Use uvicorn logger so logs show up in docker-compose logs reliably
logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/api", tags=["Matching"])


@router.get("/feed/{user_id}", response_model=list[schemas.FeedProfile])
def get_feed(
    user_id: int,
    current_user: models.Profile = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if current_user.id != user_id and not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    viewer = dao.get_profile(db, user_id)
    if viewer is None:
        return []

    profiles = feed.get_feed(db, viewer)
    logger.info(f"[feed] user_id={user_id} role={viewer.role.value} location={viewer.location} returned={len(profiles)}")
    return profiles


@router.post("/swipe", response_model=schemas.SwipeResponse, response_model_exclude_none=True)
def swipe_user(
    swipe: schemas.SwipeData,
    current_user: models.Profile = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        outcome = match.record_swipe(db, current_user.id, swipe.swiper_id, swipe.swiped_id, swipe.type)
    except match.AuthorizationMismatch as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except match.ProfileNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except match.InvalidOperation as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"[swipe] storage failure swiper={swipe.swiper_id} swiped={swipe.swiped_id}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Swipe could not be recorded")

    return schemas.SwipeResponse(is_match=outcome.is_match, match_id=outcome.match_id)


@router.get("/matches/{user_id}", response_model=list[schemas.MatchSummary])
def get_matches(
    user_id: int,
    current_user: models.Profile = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if current_user.id != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    matches = dao.list_matches_for_user(db, user_id)
    partners = {p.id: p for p in dao.get_profiles(db, [m.partner_of(user_id) for m in matches])}

    summaries = []
    for m in matches:
        partner = partners.get(m.partner_of(user_id))
        if partner is None:
            continue
        summaries.append(schemas.MatchSummary(
            match_id=m.id,
            profile_id=partner.id,
            name=partner.name,
            positions=partner.positions or [],
            location=partner.location,
            created_at=m.created_at,
        ))
    return summaries
