from typing import List, Optional

from sqlalchemy.orm import Session
import dao
import models
from config import settings


def shares_any(wanted: list, offered: list) -> bool:
    """An empty wish list accepts everything."""
    if not wanted:
        return True
    return bool(set(wanted) & set(offered or []))


def get_feed(db: Session, viewer: models.Profile, limit: Optional[int] = None) -> List[models.Profile]:

    if limit is None:
        limit = settings.FEED_LIMIT

    candidates = dao.list_feed_candidates(db, viewer)

    candidates = [
        p for p in candidates
        if shares_any(viewer.workplace_types, p.workplace_types) and shares_any(viewer.positions, p.positions)
    ]

    return candidates[:limit]
