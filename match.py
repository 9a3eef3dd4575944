import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.orm import Session
import dao
from models import Role, SwipeType

# Use uvicorn logger so logs show up in docker-compose logs reliably
logger = logging.getLogger("uvicorn.error")


class SwipeError(Exception):
    """Base class for swipe/match failures the caller can act on."""


class AuthorizationMismatch(SwipeError):
    pass


class ProfileNotFound(SwipeError):
    pass


class MatchNotFound(SwipeError):
    pass


class InvalidOperation(SwipeError):
    pass


@dataclass
class SwipeOutcome:
    is_match: bool
    match_id: Optional[int] = None


def record_swipe(db: Session, caller_id: int, swiper_id: int, swiped_id: int, swipe_type: SwipeType) -> SwipeOutcome:
    """
    Store a directed swipe and create the match when it reciprocates a LIKE.

    The swipe is committed before reciprocity is checked, and reciprocity is a
    plain re-query, so an interrupted request never loses a match: whichever
    side swipes (or retries) next will find it.
    """
    if caller_id != swiper_id:
        raise AuthorizationMismatch("Identity mismatch")
    if swiper_id == swiped_id:
        raise InvalidOperation("You cannot swipe on yourself")

    swiper = dao.get_profile(db, swiper_id)
    if swiper is None:
        raise ProfileNotFound(f"Profile {swiper_id} not found")
    swiped = dao.get_profile(db, swiped_id)
    if swiped is None:
        raise ProfileNotFound(f"Profile {swiped_id} not found")
    target_role = swiper.role.opposite()
    if swiped.role != target_role:
        raise InvalidOperation(f"A {swiper.role.value} profile can only swipe on {target_role.value} profiles")

    dao.create_swipe(db, swiper_id, swiped_id, swipe_type)

    if swipe_type != SwipeType.LIKE or not check_like_exists(db, swiped_id, swiper_id):
        return SwipeOutcome(is_match=False)

    match_id, created = create_match(db, swiper_id, swiped_id)
    if created:
        logger.info(f"[swipe] match {match_id} created for profiles {swiper_id} and {swiped_id}")
        send_auto_screener(db, match_id, swiper_id, swiped_id)

    return SwipeOutcome(is_match=True, match_id=match_id)


def check_like_exists(db: Session, sender_user_fk: int, liked_user_fk: int) -> bool:
    like = dao.find_swipe(db, sender_user_fk, liked_user_fk, SwipeType.LIKE)
    return like is not None


def create_match(db: Session, user1_fk: int, user2_fk: int):
    """Returns (match_id, created); created is False when the pair was already matched."""
    match, created = dao.create_match_if_absent(db, user1_fk, user2_fk)
    return match.id, created


def build_screener_message(questions: List[str], clinic_name: Optional[str]) -> str:
    greeting = f"Hi, {clinic_name} here. Glad we matched! 👋" if clinic_name else "Hi, glad we matched! 👋"
    questions_list = "\n".join(f"• {q}" for q in questions)
    return f"{greeting}\nTo move forward, please answer a few short questions:\n\n{questions_list}"


def send_auto_screener(db: Session, match_id: int, user1_fk: int, user2_fk: int) -> bool:
    """
    Post the clinic's screening questions into a freshly created match.

    Best effort: the match is already committed, so any failure here is
    logged and reported as False instead of being raised.
    """
    try:
        profiles = dao.get_profiles(db, [user1_fk, user2_fk])
        clinic = next(
            (p for p in profiles if p.role == Role.CLINIC and p.is_auto_screener_active),
            None,
        )
        if clinic is None or not clinic.screening_questions:
            return False

        content = build_screener_message(clinic.screening_questions, clinic.name)
        dao.create_message(db, match_id, clinic.id, content)
        logger.info(f"[swipe] auto-screener sent message for match {match_id}")
        return True
    except Exception:
        db.rollback()
        logger.exception(f"[swipe] auto-screener failed for match {match_id}")
        return False


def post_message(db: Session, match_id: int, sender_id: int, content: str):
    match = dao.get_match(db, match_id)
    if match is None:
        raise MatchNotFound(f"Match {match_id} not found")
    if not match.has_member(sender_id):
        raise AuthorizationMismatch("You are not part of this match")
    return dao.create_message(db, match_id, sender_id, content)
