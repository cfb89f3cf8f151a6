"""SQLAlchemy ORM model for the shortlinks service.

Data Model Layout
=================
::
    urls table
    ├─ id (SERIAL PRIMARY KEY)
    ├─ short_code (VARCHAR(10) UNIQUE, INDEXED)
    ├─ original_url (TEXT NOT NULL)
    ├─ clicks (INTEGER DEFAULT 0)
    ├─ created_at (TIMESTAMPTZ, DEFAULT NOW())
    └─ last_clicked_at (TIMESTAMPTZ, NULL)

Key Behaviours
===============
- ``short_code`` is uniquely indexed; the index is what makes inserts atomic
  "insert if absent" operations.
- Only ``clicks`` and ``last_clicked_at`` ever change after creation, and only
  through the click recorder.
- Python attribute names (``code``, ``target_url``) differ from the column
  names, which keep the layout of the existing ``urls`` table.

Classes:
    Link:  A short code mapped to its target URL, with click metadata.
"""

import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from shortlinks.config import MAX_CODE_LENGTH
from shortlinks.database import Base

__all__ = ["Link", "utcnow"]


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class Link(Base):
    __tablename__ = "urls"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column("short_code", String(MAX_CODE_LENGTH), unique=True, index=True, nullable=False)
    target_url: Mapped[str] = mapped_column("original_url", Text, nullable=False)
    clicks: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    last_clicked_at: Mapped[datetime.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<Link(id={self.id}, code='{self.code}', clicks={self.clicks})>"
