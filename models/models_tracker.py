import enum
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String
from core.db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CompareMode(str, enum.Enum):
    INNER_TEXT = "innerText"
    INNER_HTML = "innerHtml"


class Tracker(Base):
    __tablename__ = "trackers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    cron_expr = Column(String(255), nullable=False)
    compare_mode = Column(
        Enum(CompareMode, name="tracker_compare_modes", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    website_url = Column(String(2550), nullable=False)
    selector = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
