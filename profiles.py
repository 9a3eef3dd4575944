from typing import Any, Dict, Optional, Union

from sqlalchemy.orm import Session
import dao
import models


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _parse_int(value: Any) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def compute_salary(salary_info: Optional[Union[int, float, Dict[str, Any]]]) -> Optional[int]:
    """
    Collapse a salary range into the single figure stored on the profile.

    {min, max} -> mean of the bounds (rounded half up) when max is set,
    otherwise min. Plain numbers are kept as they are.
    """
    if salary_info is None:
        return None
    if isinstance(salary_info, dict):
        low = _parse_int(salary_info.get("min"))
        high = _parse_int(salary_info.get("max"))
        return (low + high + 1) // 2 if high > 0 else low
    return _parse_int(salary_info)


def save_profile(db: Session, payload: Dict[str, Any]) -> models.Profile:
    values = {
        "email": normalize_email(payload["email"]),
        "role": payload["role"],
        "name": payload.get("name"),
        "position": payload.get("position") or "",
        "location": payload.get("location"),
        "salary_info": compute_salary(payload.get("salary_info")),
        "availability": payload.get("availability"),
        "workplace_types": list(payload.get("workplace_types") or []),
        "positions": list(payload.get("positions") or []),
        "screening_questions": list(payload.get("screening_questions") or []),
        "is_auto_screener_active": bool(payload.get("is_auto_screener_active")),
        "is_urgent": bool(payload.get("is_urgent")),
    }
    return dao.upsert_profile(db, values)


def find_by_email(db: Session, email: str) -> Optional[models.Profile]:
    return dao.get_profile_by_email(db, normalize_email(email))
