"""
Stale Account Service - lock the passwords of long-unused accounts.

Cron enumerates accounts whose last access is older than the configured
threshold and queues them; the queue worker resets one account at a time.
"""
from datetime import datetime, timedelta
from typing import Any, List, Optional

from flask import current_app
from sqlalchemy import func, not_
from sqlalchemy.exc import SQLAlchemyError

from paranoia_app.core.cron import enqueue
from paranoia_app.core.logging_config import get_logger
from paranoia_app.core.mail import send_mail
from paranoia_app.models import QueueItem, User, db
from paranoia_app.models.user import LOCKED_HASH_PREFIX
from paranoia_app.utils.time_utils import utcnow

from ..config import ParanoiaDefaultConfig
from ..logics.hashing import lock_password_hash
from .settings_service import get_settings

logger = get_logger('paranoia')


def build_expired_mail(params):
    """Subject and body of the ``paranoia_expired`` message."""
    site_name = params.get('site_name') or 'the site'
    subject = f"Your password at {site_name} has been reset"
    body = (
        f"Hello {params['username']},\n\n"
        f"Your account at {site_name} has not been used for more than "
        f"{params['threshold']} days, so its password has been reset as a security measure.\n\n"
        "To use the account again, request a new password from the login page.\n"
    )
    return subject, body


class StaleAccountService:
    """Find, queue and reset stale accounts."""

    @staticmethod
    def find_stale_accounts(now: datetime, threshold_days: int, limit: Optional[int] = None) -> List[int]:
        """Ids of accounts unused since before ``now - threshold_days``.

        Accounts that never logged in are measured from their creation date.
        Accounts whose password is already locked are left out.
        """
        if threshold_days <= 0:
            return []
        cutoff = now - timedelta(days=threshold_days)
        last_seen = func.coalesce(User.last_access, User.created_at)

        query = (
            db.session.query(User.user_id)
            .filter(last_seen < cutoff)
            .filter(not_(User.password_hash.startswith(LOCKED_HASH_PREFIX)))
            .order_by(User.user_id)
        )
        if limit:
            query = query.limit(limit)
        return [user_id for (user_id,) in query]

    @staticmethod
    def queued_account_ids() -> set:
        items = QueueItem.query.filter_by(name=ParanoiaDefaultConfig.RESET_QUEUE).all()
        return {item.data.get('uid') for item in items if isinstance(item.data, dict)}

    @classmethod
    def enqueue_stale_accounts(cls, now: Optional[datetime] = None) -> int:
        """Queue every stale account not already queued. No-op when the feature is off."""
        settings = get_settings()
        threshold = settings['access_threshold']
        if not threshold:
            return 0

        now = now or utcnow()
        limit = current_app.config.get('PARANOIA_CRON_BATCH_SIZE', ParanoiaDefaultConfig.CRON_BATCH_SIZE)
        already_queued = cls.queued_account_ids()

        count = 0
        for user_id in cls.find_stale_accounts(now, threshold, limit=limit):
            if user_id in already_queued:
                continue
            enqueue(ParanoiaDefaultConfig.RESET_QUEUE, {'uid': user_id})
            count += 1
        db.session.commit()

        if count:
            logger.info("Queued %d stale account(s) for password reset.", count)
        return count

    @staticmethod
    def reset_account(data: Any) -> bool:
        """Queue worker: lock the password of one account.

        Returns False when the payload is unusable, the account is gone or
        the update failed.
        """
        user_id = data.get('uid') if isinstance(data, dict) else data
        try:
            user_id = int(user_id)
        except (TypeError, ValueError):
            logger.warning("Dropped password reset item with invalid payload %r.", data)
            return False
        user = db.session.get(User, user_id)
        if user is None:
            logger.info("Skipped password reset for uid %s: account no longer exists.", user_id)
            return False

        settings = get_settings()
        username, email = user.username, user.email

        user.password_hash = lock_password_hash()
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("Password reset failed for %s (uid %s): %s", username, user_id, e)
            return False

        logger.info(
            "Password of %s (uid %s) reset after more than %s days without access.",
            username, user_id, settings['access_threshold'],
        )

        if settings['email_notification']:
            send_mail(
                ParanoiaDefaultConfig.EXPIRED_MAIL_KEY,
                email,
                {
                    'username': username,
                    'threshold': settings['access_threshold'],
                    'site_name': current_app.config.get('SITE_NAME'),
                },
            )
        return True
