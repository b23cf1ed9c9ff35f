"""
Session Service - terminate an account's other sessions.

Only the default database store can be queried; for any other backend the
step is skipped and a critical entry is logged so the gap is visible.
"""
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from paranoia_app.core.logging_config import get_logger
from paranoia_app.models import AuthSession, User, db

logger = get_logger('paranoia')

DEFAULT_SESSION_BACKEND = 'database'


def invalidate_other_sessions(user: User, keep_session_id: Optional[str],
                              backend: str = DEFAULT_SESSION_BACKEND) -> int:
    """Delete every session of ``user`` except ``keep_session_id``.

    Returns the number of sessions deleted.
    """
    if backend != DEFAULT_SESSION_BACKEND:
        logger.critical(
            "Session backend '%s' cannot be queried; other sessions of %s (uid %s) "
            "were not terminated after a password change.",
            backend, user.username, user.user_id,
        )
        return 0

    query = AuthSession.query.filter(AuthSession.user_id == user.user_id)
    if keep_session_id:
        query = query.filter(AuthSession.session_id != keep_session_id)

    try:
        deleted = query.delete(synchronize_session=False)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Could not terminate sessions of uid %s: %s", user.user_id, e)
        return 0

    if deleted:
        logger.info("Terminated %d other session(s) of %s (uid %s).", deleted, user.username, user.user_id)
    return deleted
