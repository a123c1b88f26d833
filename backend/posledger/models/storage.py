from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow


class StoreBlob(db.Model):
    """
    One whole-collection JSON snapshot per key.

    WHY: The ledger is memory-resident; the database is only a durable
    key-value store. Every write replaces the full payload for its key.
    """
    __tablename__ = "store_blobs"

    key = db.Column(db.String(64), primary_key=True)
    payload = db.Column(db.JSON, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "updated_at": to_utc_z(self.updated_at),
        }
