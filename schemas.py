from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Any, Optional, Union

from models import Role, SwipeType


class LoginRequest(BaseModel):
    email: str


class SalaryRange(BaseModel):
    min: Optional[Union[int, float, str]] = None
    max: Optional[Union[int, float, str]] = None


class ProfileIn(BaseModel):
    """Registration / profile update payload, keyed by email"""
    email: str = Field(min_length=1)
    role: Role
    name: Optional[str] = None
    position: Optional[str] = None
    location: Optional[str] = None
    salary_info: Optional[Union[int, float, SalaryRange]] = None
    availability: Optional[Any] = None
    workplace_types: list[str] = []
    positions: list[str] = []
    screening_questions: list[str] = []
    is_auto_screener_active: bool = False
    is_urgent: bool = False


class ProfileOut(BaseModel):
    id: int
    email: str
    role: Role
    name: Optional[str] = None
    position: Optional[str] = None
    positions: list[str] = []
    workplace_types: list[str] = []
    location: Optional[str] = None
    availability: Optional[Any] = None
    salary_info: Optional[int] = None
    is_urgent: bool
    is_auto_screener_active: bool
    screening_questions: list[str] = []
    is_admin: bool
    is_blocked: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class FeedProfile(BaseModel):
    """A candidate shown in the feed"""
    id: int
    name: Optional[str] = None
    positions: list[str] = []
    workplace_types: list[str] = []
    location: Optional[str] = None
    salary_info: Optional[int] = None
    availability: Optional[Any] = None
    is_urgent: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    user: ProfileOut
    token: str


class LoginResponse(AuthResponse):
    success: bool = True


class SwipeData(BaseModel):
    """Directed swipe submitted by the authenticated profile"""
    swiper_id: int
    swiped_id: int
    type: SwipeType


class SwipeResponse(BaseModel):
    is_match: bool = Field(alias="isMatch")
    match_id: Optional[int] = Field(default=None, alias="matchId")

    model_config = ConfigDict(populate_by_name=True)


class MatchSummary(BaseModel):
    """A match as seen by one of its two profiles"""
    match_id: int
    profile_id: int
    name: Optional[str] = None
    positions: list[str] = []
    location: Optional[str] = None
    created_at: Optional[datetime] = None


class MessageIn(BaseModel):
    match_id: int
    sender_id: int
    content: str = Field(min_length=1)


class MessageOut(BaseModel):
    id: int
    match_id: int
    sender_id: int
    content: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BlockRequest(BaseModel):
    blocked: bool = True
