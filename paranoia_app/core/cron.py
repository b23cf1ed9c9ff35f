# File: paranoia_app/core/cron.py
# Periodic tasks and the database-backed work queue drained by cron.

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

from flask import current_app
from sqlalchemy import or_

from .extensions import db
from .signals import cron_tick
from ..utils.time_utils import utcnow

LEASE_SECONDS = 300


@dataclass(frozen=True)
class QueueWorker:
    """A callable that processes the payload of one queue item."""

    name: str
    func: Callable[[Any], Any]
    time_limit: int = 60


_queue_workers: Dict[str, QueueWorker] = {}


def register_queue_worker(name: str, func: Callable[[Any], Any], time_limit: int = 60) -> QueueWorker:
    worker = QueueWorker(name=name, func=func, time_limit=time_limit)
    _queue_workers[name] = worker
    return worker


def enqueue(name: str, data: Any) -> 'QueueItem':
    """Add an item to a queue. The caller commits."""
    from ..models import QueueItem

    item = QueueItem(name=name, data=data)
    db.session.add(item)
    return item


def queue_size(name: str) -> int:
    from ..models import QueueItem

    return QueueItem.query.filter_by(name=name).count()


def claim_item(name: str, now: Optional[datetime] = None, lease_seconds: int = LEASE_SECONDS):
    """Lease the oldest unclaimed item of a queue, or return None."""
    from ..models import QueueItem

    now = now or utcnow()
    item = (
        QueueItem.query
        .filter(QueueItem.name == name)
        .filter(or_(QueueItem.expires_at.is_(None), QueueItem.expires_at < now))
        .order_by(QueueItem.item_id)
        .first()
    )
    if item is None:
        return None
    item.expires_at = now + timedelta(seconds=lease_seconds)
    db.session.commit()
    return item


def delete_item(item) -> None:
    db.session.delete(item)
    db.session.commit()


def process_queue(worker: QueueWorker, now: Optional[datetime] = None) -> int:
    """Run a worker over its queue, one item at a time, within its time budget.

    A worker exception leaves the item leased; it is picked up again once the
    lease expires.
    """
    processed = 0
    deadline = time.monotonic() + worker.time_limit
    while time.monotonic() < deadline:
        item = claim_item(worker.name, now=now)
        if item is None:
            break
        try:
            worker.func(item.data)
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(
                "Queue worker '%s' failed on item %s: %s", worker.name, item.item_id, e, exc_info=True
            )
            continue
        delete_item(item)
        processed += 1
    return processed


def run_cron(now: Optional[datetime] = None) -> Dict[str, int]:
    """Fire ``cron_tick`` then drain every registered queue."""

    now = now or utcnow()
    cron_tick.send(current_app._get_current_object(), now=now)

    results = {}
    for name, worker in list(_queue_workers.items()):
        results[name] = process_queue(worker)
        if results[name]:
            current_app.logger.info("Cron processed %d item(s) from queue '%s'", results[name], name)
    return results
