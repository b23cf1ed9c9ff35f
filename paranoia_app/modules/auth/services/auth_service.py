"""
Auth Service - Core authentication logic.

Handles registration, credential checks and the server-side session rows
that back every login.
"""
import secrets
from typing import Optional

from flask import current_app

from paranoia_app.core.extensions import db
from paranoia_app.core.signals import user_registered
from paranoia_app.models import AuthSession, User
from paranoia_app.utils.time_utils import as_utc, utcnow

# Flask session key holding the AuthSession id.
SESSION_KEY = 'sid'

# Seconds between two writes of last_seen/last_access for the same session.
TOUCH_INTERVAL = 300


class AuthService:
    """Service for Authentication related operations."""

    @staticmethod
    def register_user(username, email, password):
        """
        Register a new user and emit ``user_registered``.

        Returns:
            User object if successful
        """
        user = User(username=username, email=email)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()

        current_app.logger.info(f"User registered: {username} ({user.user_id})")

        try:
            user_registered.send(current_app._get_current_object(), user=user)
        except Exception as e:
            current_app.logger.error(f"Error emitting user_registered signal: {e}")

        return user

    @staticmethod
    def authenticate_user(username, password) -> Optional[User]:
        """Return the user for valid credentials of an active account, else None."""
        user = User.query.filter_by(username=username).first()
        if user and user.is_active and user.check_password(password):
            return user
        return None

    @staticmethod
    def start_session(user: User, ip_address: str = None) -> AuthSession:
        """Create the session row for a fresh login and mark the account accessed."""
        now = utcnow()
        auth_session = AuthSession(
            session_id=secrets.token_hex(32),
            user_id=user.user_id,
            ip_address=ip_address,
            created_at=now,
            last_seen=now,
        )
        user.last_access = now
        db.session.add(auth_session)
        db.session.commit()
        return auth_session

    @staticmethod
    def end_session(session_id: Optional[str]) -> None:
        if not session_id:
            return
        auth_session = db.session.get(AuthSession, session_id)
        if auth_session is not None:
            db.session.delete(auth_session)
            db.session.commit()

    @staticmethod
    def touch_session(user: User, session_id: Optional[str]) -> bool:
        """Validate the session row of a logged-in user.

        Returns False when the row is gone (e.g. terminated after a password
        change); the caller logs the user out.
        """
        auth_session = db.session.get(AuthSession, session_id) if session_id else None
        if auth_session is None or auth_session.user_id != user.user_id:
            return False

        now = utcnow()
        last_seen = as_utc(auth_session.last_seen)
        if last_seen is None or (now - last_seen).total_seconds() > TOUCH_INTERVAL:
            auth_session.last_seen = now
            user.last_access = now
            try:
                db.session.commit()
            except Exception:
                db.session.rollback()
        return True
