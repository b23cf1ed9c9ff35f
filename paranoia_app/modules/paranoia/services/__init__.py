from .enforcement_service import PolicyEnforcer
from .account_guard import OWNER_PROTECTED_FIELDS, guard_owner_account
from .session_service import invalidate_other_sessions
from .settings_service import get_settings, migrate_legacy_settings, save_settings
from .stale_account_service import StaleAccountService

__all__ = [
    'PolicyEnforcer',
    'OWNER_PROTECTED_FIELDS',
    'guard_owner_account',
    'invalidate_other_sessions',
    'get_settings',
    'migrate_legacy_settings',
    'save_settings',
    'StaleAccountService',
]
