import enum

from sqlalchemy import (
    JSON, Boolean, CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.sql import func
from db import Base


class Role(str, enum.Enum):
    STAFF = "STAFF"
    CLINIC = "CLINIC"

    def opposite(self) -> "Role":
        return Role.CLINIC if self is Role.STAFF else Role.STAFF


class SwipeType(str, enum.Enum):
    LIKE = "LIKE"
    PASS = "PASS"


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    role = Column(Enum(Role, name="profile_role"), nullable=False)
    name = Column(String(255))
    position = Column(String(255), nullable=False, default="")
    positions = Column(JSON, nullable=False, default=list)
    workplace_types = Column(JSON, nullable=False, default=list)
    location = Column(String(255))
    availability = Column(JSON)
    salary_info = Column(Integer)
    is_urgent = Column(Boolean, nullable=False, default=False)
    is_auto_screener_active = Column(Boolean, nullable=False, default=False)
    screening_questions = Column(JSON, nullable=False, default=list)
    is_admin = Column(Boolean, nullable=False, default=False)
    is_blocked = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


class Swipe(Base):
    __tablename__ = "swipes"

    id = Column(Integer, primary_key=True, index=True)
    swiper_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    swiped_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    type = Column(Enum(SwipeType, name="swipe_type"), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    # Re-submitting the same directed swipe must not create a second row
    __table_args__ = (UniqueConstraint("swiper_id", "swiped_id", "type", name="uq_swipe_direction_type"),)


class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    # The pair is stored ordered, so (A, B) and (B, A) hit the same unique key
    user_one_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    user_two_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_one_id", "user_two_id", name="uq_match_pair"),
        CheckConstraint("user_one_id < user_two_id", name="ck_match_pair_ordered"),
    )

    def partner_of(self, user_id: int) -> int:
        return self.user_two_id if self.user_one_id == user_id else self.user_one_id

    def has_member(self, user_id: int) -> bool:
        return user_id in (self.user_one_id, self.user_two_id)


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    match_id = Column(Integer, ForeignKey("matches.id"), nullable=False, index=True)
    sender_id = Column(Integer, ForeignKey("profiles.id"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
