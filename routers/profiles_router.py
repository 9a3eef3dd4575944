from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
import logging

from auth import create_access_token, require_admin
from db import get_db
import dao, models, profiles, schemas

# Use uvicorn logger so logs show up in docker-compose logs reliably
logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/api", tags=["Profiles"])


@router.post("/auth/login", response_model=schemas.LoginResponse)
def login(credentials: schemas.LoginRequest, db: Session = Depends(get_db)):
    if not credentials.email.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email missing")

    user = profiles.find_by_email(db, credentials.email)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if user.is_blocked:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Profile is blocked")

    return schemas.LoginResponse(success=True, user=schemas.ProfileOut.model_validate(user), token=create_access_token(user))


@router.post("/profiles", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
def save_profile(payload: schemas.ProfileIn, db: Session = Depends(get_db)):
    logger.info(f"[profiles] saving profile {profiles.normalize_email(payload.email)}")

    user = profiles.save_profile(db, payload.model_dump())
    return schemas.AuthResponse(user=schemas.ProfileOut.model_validate(user), token=create_access_token(user))


@router.get("/admin/profiles", response_model=list[schemas.ProfileOut])
def list_profiles(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    admin: models.Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return dao.list_profiles(db, skip=skip, limit=limit)


@router.post("/admin/profiles/{profile_id}/block", response_model=schemas.ProfileOut)
def block_profile(
    profile_id: int,
    body: schemas.BlockRequest,
    admin: models.Profile = Depends(require_admin),
    db: Session = Depends(get_db),
):
    if profile_id == admin.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot block yourself")

    profile = dao.set_profile_blocked(db, profile_id, body.blocked)
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")

    logger.info(f"[admin] profile {profile_id} blocked={body.blocked} by admin {admin.id}")
    return profile
