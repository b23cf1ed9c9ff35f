"""System and administration related models."""

from __future__ import annotations

from sqlalchemy.types import JSON

from ..core.extensions import db
from ..utils.time_utils import utcnow


class QueueItem(db.Model):
    """One unit of deferred work processed by cron.

    ``expires_at`` is a lease: while it lies in the future the item is being
    processed and no other run claims it.
    """

    __tablename__ = 'queue_items'

    item_id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, index=True)
    data = db.Column(JSON)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    expires_at = db.Column(db.DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f'<QueueItem {self.item_id} {self.name}>'
