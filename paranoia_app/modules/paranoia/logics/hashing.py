"""Credentials that can never be verified."""

import secrets

from werkzeug.security import generate_password_hash

from paranoia_app.models.user import LOCKED_HASH_PREFIX


def lock_password_hash() -> str:
    """Salted hash of a throw-away secret behind the lock sentinel.

    ``User.check_password`` rejects any value carrying the sentinel, so no
    plaintext, including the account's previous password, matches it.
    """
    return LOCKED_HASH_PREFIX + generate_password_hash(secrets.token_urlsafe(32))


def is_locked_hash(value) -> bool:
    return isinstance(value, str) and value.startswith(LOCKED_HASH_PREFIX)
