"""Keep the owner account (uid 1) editable by its owner only."""

from paranoia_app.models import User

OWNER_PROTECTED_FIELDS = ('username', 'email', 'password', 'current_password')


def guard_owner_account(form, acting_user, target_user) -> bool:
    """Lock identity fields of the owner's profile form for everyone else.

    Returns True when fields were locked.
    """
    if target_user is None or target_user.user_id != User.OWNER_ID:
        return False
    if acting_user is not None and getattr(acting_user, 'user_id', None) == User.OWNER_ID:
        return False

    for name in OWNER_PROTECTED_FIELDS:
        form.deny_field(name)
    return True
