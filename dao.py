from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import or_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

import models


# Columns replaced when a profile is re-submitted for an existing email.
# Role and the admin/blocked flags are never changed by an upsert.
PROFILE_UPSERT_COLUMNS = (
    "name",
    "position",
    "location",
    "salary_info",
    "availability",
    "workplace_types",
    "positions",
    "screening_questions",
    "is_auto_screener_active",
    "is_urgent",
)


def _insert(db: Session, model):
    """Dialect insert so conflicts can be resolved by the database itself."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model)
    if dialect == "sqlite":
        return sqlite.insert(model)
    raise NotImplementedError(f"Idempotent inserts are not supported on {dialect}")


def upsert_profile(db: Session, values: Dict[str, Any]) -> models.Profile:
    stmt = _insert(db, models.Profile).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=[models.Profile.email],
        set_={col: stmt.excluded[col] for col in PROFILE_UPSERT_COLUMNS if col in values},
    ).returning(models.Profile.id)
    profile_id = db.execute(stmt).scalar_one()
    db.commit()
    return db.get(models.Profile, profile_id, populate_existing=True)


def get_profile(db: Session, profile_id: int) -> Optional[models.Profile]:
    return db.query(models.Profile).filter(models.Profile.id == profile_id).first()


def get_profile_by_email(db: Session, email: str) -> Optional[models.Profile]:
    return db.query(models.Profile).filter(models.Profile.email == email).first()


def get_profiles(db: Session, profile_ids: List[int]) -> List[models.Profile]:
    return db.query(models.Profile).filter(models.Profile.id.in_(profile_ids)).all()


def list_profiles(db: Session, skip: int = 0, limit: int = 100) -> List[models.Profile]:
    return db.query(models.Profile).order_by(models.Profile.id).offset(skip).limit(limit).all()


def set_profile_blocked(db: Session, profile_id: int, blocked: bool) -> Optional[models.Profile]:
    obj = get_profile(db, profile_id)
    if not obj:
        return None
    obj.is_blocked = blocked
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def list_feed_candidates(db: Session, viewer: models.Profile) -> List[models.Profile]:
    """Opposite-role, same-location profiles the viewer has not swiped yet, urgent first."""
    already_swiped = select(models.Swipe.swiped_id).where(models.Swipe.swiper_id == viewer.id)
    return db.query(models.Profile).filter(
        models.Profile.role == viewer.role.opposite(),
        models.Profile.location == viewer.location,
        models.Profile.id != viewer.id,
        models.Profile.is_blocked.is_(False),
        models.Profile.id.not_in(already_swiped),
    ).order_by(
        models.Profile.is_urgent.desc(),
        models.Profile.created_at.desc(),
        models.Profile.id.desc(),
    ).all()


def create_swipe(db: Session, swiper_id: int, swiped_id: int, swipe_type: models.SwipeType) -> bool:
    """Insert a directed swipe. Returns False when the identical swipe already existed."""
    stmt = (
        _insert(db, models.Swipe)
        .values(swiper_id=swiper_id, swiped_id=swiped_id, type=swipe_type)
        .on_conflict_do_nothing(index_elements=["swiper_id", "swiped_id", "type"])
        .returning(models.Swipe.id)
    )
    swipe_id = db.execute(stmt).scalar_one_or_none()
    db.commit()
    return swipe_id is not None


def find_swipe(db: Session, swiper_id: int, swiped_id: int, swipe_type: models.SwipeType) -> Optional[models.Swipe]:
    return db.query(models.Swipe).filter(
        models.Swipe.swiper_id == swiper_id,
        models.Swipe.swiped_id == swiped_id,
        models.Swipe.type == swipe_type,
    ).first()


def create_match_if_absent(db: Session, first_user_fk: int, second_user_fk: int) -> Tuple[models.Match, bool]:
    """
    Create the match for an unordered pair unless it already exists.

    The unique key on the ordered pair makes concurrent callers race on the
    database, not in Python: exactly one INSERT wins, the others affect no
    rows and read the winner back. Returns (match, created).
    """
    user_one, user_two = sorted((first_user_fk, second_user_fk))
    stmt = (
        _insert(db, models.Match)
        .values(user_one_id=user_one, user_two_id=user_two)
        .on_conflict_do_nothing(index_elements=["user_one_id", "user_two_id"])
        .returning(models.Match.id)
    )
    match_id = db.execute(stmt).scalar_one_or_none()
    db.commit()

    if match_id is not None:
        return db.get(models.Match, match_id), True
    return get_match_between(db, user_one, user_two), False


def get_match(db: Session, match_id: int) -> Optional[models.Match]:
    return db.query(models.Match).filter(models.Match.id == match_id).first()


def get_match_between(db: Session, user1_fk: int, user2_fk: int) -> Optional[models.Match]:
    user_one, user_two = sorted((user1_fk, user2_fk))
    return db.query(models.Match).filter(
        models.Match.user_one_id == user_one,
        models.Match.user_two_id == user_two,
    ).first()


def list_matches_for_user(db: Session, user_id: int) -> List[models.Match]:
    return db.query(models.Match).filter(
        or_(models.Match.user_one_id == user_id, models.Match.user_two_id == user_id)
    ).order_by(models.Match.created_at.desc(), models.Match.id.desc()).all()


def create_message(db: Session, match_id: int, sender_id: int, content: str) -> models.Message:
    db_obj = models.Message(match_id=match_id, sender_id=sender_id, content=content)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def list_messages(db: Session, match_id: int) -> List[models.Message]:
    return db.query(models.Message).filter(
        models.Message.match_id == match_id
    ).order_by(models.Message.created_at.asc(), models.Message.id.asc()).all()


__all__ = [
    "upsert_profile",
    "get_profile",
    "get_profile_by_email",
    "get_profiles",
    "list_profiles",
    "set_profile_blocked",
    "list_feed_candidates",
    "create_swipe",
    "find_swipe",
    "create_match_if_absent",
    "get_match",
    "get_match_between",
    "list_matches_for_user",
    "create_message",
    "list_messages",
]
