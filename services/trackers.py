import logging
from typing import List

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from core.errors import NotFoundError
from models.models_tracker import CompareMode, Tracker, utcnow

logger = logging.getLogger("pagewatch.trackers")

# INTEGER column range; anything outside it cannot name a row
MAX_ID = 2**31 - 1


def _fields(data) -> dict:
    return {
        "name": data.name,
        "cron_expr": data.cron_expr,
        "compare_mode": CompareMode(data.compare_mode),
        "website_url": data.website_url,
        "selector": data.selector,
    }


def _require_valid_id(tracker_id: int):
    if not 1 <= tracker_id <= MAX_ID:
        raise NotFoundError("Tracker not found")


class TrackerRepository:
    """
    Tracker rows scoped to their owner.

    Every lookup, update and delete filters on id AND user_id in the same
    statement, so a tracker owned by someone else behaves exactly like a
    missing one.
    """

    def __init__(self, session: Session):
        self.s = session

    def create(self, owner_id: int, data) -> Tracker:
        now = utcnow()
        t = Tracker(user_id=owner_id, created_at=now, updated_at=now, **_fields(data))
        self.s.add(t)
        self.s.commit()
        self.s.refresh(t)
        logger.info("tracker %s created for user %s", t.id, owner_id)
        return t

    def list_by_owner(self, owner_id: int) -> List[Tracker]:
        return list(self.s.scalars(select(Tracker).where(Tracker.user_id == owner_id).order_by(Tracker.id)))

    def get_by_id(self, owner_id: int, tracker_id: int) -> Tracker:
        _require_valid_id(tracker_id)
        t = self.s.scalar(select(Tracker).where(Tracker.id == tracker_id, Tracker.user_id == owner_id))
        if t is None:
            raise NotFoundError("Tracker not found")
        return t

    def update(self, owner_id: int, tracker_id: int, data) -> Tracker:
        _require_valid_id(tracker_id)
        stmt = (
            update(Tracker)
            .where(Tracker.id == tracker_id, Tracker.user_id == owner_id)
            .values(updated_at=utcnow(), **_fields(data))
            .returning(Tracker)
            .execution_options(synchronize_session=False)
        )
        t = self.s.scalars(stmt).one_or_none()
        if t is None:
            self.s.rollback()
            raise NotFoundError("Tracker not found")
        self.s.commit()
        self.s.refresh(t)
        logger.info("tracker %s updated", tracker_id)
        return t

    def delete(self, owner_id: int, tracker_id: int) -> None:
        _require_valid_id(tracker_id)
        stmt = delete(Tracker).where(Tracker.id == tracker_id, Tracker.user_id == owner_id).returning(Tracker.id)
        if self.s.scalars(stmt).one_or_none() is None:
            self.s.rollback()
            raise NotFoundError("Tracker not found")
        self.s.commit()
        logger.info("tracker %s deleted", tracker_id)
