from __future__ import annotations

from .app import db


class IssuanceStat(db.Model):
    """Per-client issuance counter, keyed like ``cert_stats_<address>``."""

    __tablename__ = "issuance_stats"

    storage_key = db.Column(db.String(128), primary_key=True)
    count = db.Column(db.Integer, nullable=False, default=0)
    last_generated = db.Column(db.DateTime(timezone=True))

    def to_json(self) -> dict:
        return {
            "count": self.count or 0,
            "lastGenerated": (
                self.last_generated.isoformat() if self.last_generated else None
            ),
        }
