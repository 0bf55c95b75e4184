"""
StoredSnapshot model — the primary store's key-value table.

The primary store keeps one row per key. The simulator only ever uses one
key (settings.STORAGE_KEY), whose value is the whole ledger snapshot as a
JSON text blob. Writes replace the row; last write wins.
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from bank_sim.database import Base


class StoredSnapshot(Base):
    __tablename__ = "stored_snapshots"

    key: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
    )

    # Serialized ledger snapshot (JSON text)
    value: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
