"""
db/models/cache_snapshot.py

Durable mirror of the in-memory response cache.
One row per cache namespace.
"""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class CacheSnapshot(TimestampMixin, Base):
    """
    Serialized cache mapping for one namespace.

    ``payload`` holds the whole cache as one JSON document, e.g.::

        {
            "district_MAHARASHTRA_PUNE": {"data": {...}, "timestamp": 1760000000.0},
            "district_list_MAHARASHTRA": {"data": ["AHMEDNAGAR", ...], "timestamp": ...}
        }

    The payload is opaque to the database; it is rewritten in full on every
    cache write.
    """

    __tablename__ = "cache_snapshots"

    namespace: Mapped[str] = mapped_column(
        String(128),
        primary_key=True,
        comment="Cache namespace, e.g. mgnregaCache",
    )
    payload: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="JSON-serialized cache mapping",
    )
