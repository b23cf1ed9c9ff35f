"""
Enforcement Service - apply collected policy to the host.

Hiding is presentational (entries removed from admin forms). Disabling and
stripping change stored state and are re-run on every relevant lifecycle
event so that state changed behind the UI's back is corrected again.
"""
from typing import Callable, List, Optional, Tuple

from flask import flash, has_request_context
from sqlalchemy.exc import SQLAlchemyError

from paranoia_app.core.logging_config import get_logger
from paranoia_app.core.module_registry import (
    disable_modules,
    get_module,
    is_module_enabled,
    restricted_permissions,
)
from paranoia_app.models import Role, RolePermission, db

from ..logics.registry import (
    DISABLED_MODULES,
    HIDDEN_MODULES,
    HIDDEN_PATHS,
    HIDDEN_PERMISSIONS,
    RISKY_FORMS,
    collect,
    normalize_path,
)

logger = get_logger('paranoia')

# Roles that may never hold a restricted permission.
BROAD_ROLE_IDS = (Role.ANONYMOUS_ID, Role.AUTHENTICATED_ID)

TAINTED_FORM_MESSAGE = "This form has been disabled for security reasons."


def _default_notify(message: str) -> None:
    logger.warning(message)
    if has_request_context():
        flash(message, 'warning')


def _reject_tainted_form(form) -> bool:
    form.form_errors.append(TAINTED_FORM_MESSAGE)
    return False


class PolicyEnforcer:
    """Applies the merged policy declarations."""

    # --- Hiding ---

    @staticmethod
    def hide_module_entries(form) -> List[str]:
        """Remove hidden modules from the module administration form."""
        return [key for key in sorted(collect(HIDDEN_MODULES)) if form.remove_module(key)]

    @staticmethod
    def hide_permission_entries(form) -> List[str]:
        """Remove hidden permissions from the role/permission matrix form."""
        return [name for name in sorted(collect(HIDDEN_PERMISSIONS)) if form.remove_permission(name)]

    @staticmethod
    def is_path_hidden(path: str) -> bool:
        path = normalize_path(path)
        for hidden in collect(HIDDEN_PATHS):
            if hidden == '/' or path == hidden or path.startswith(hidden + '/'):
                return True
        return False

    # --- Disabling ---

    @staticmethod
    def enforce_disabled_modules(notify: Optional[Callable[[str], None]] = None) -> List[str]:
        """Switch off every declared module that is currently on.

        ``notify`` receives one message per module actually disabled.
        """
        notify = notify or _default_notify
        targets = []
        for key in sorted(collect(DISABLED_MODULES)):
            module = get_module(key)
            if module is None or module.is_core:
                continue
            if is_module_enabled(key):
                targets.append(key)
        if not targets:
            return []

        try:
            disabled = disable_modules(targets)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("Could not disable modules %s: %s", ", ".join(targets), e)
            return []

        for key in disabled:
            module = get_module(key)
            notify(f"The {module.display_name or key} module has been disabled for security reasons.")
        return disabled

    @staticmethod
    def strip_risky_permissions() -> List[Tuple[str, str]]:
        """Revoke every hidden permission from every role holding it.

        Each role is saved on its own; a failed save is logged and the other
        roles are still processed. Returns ``(role_name, permission)`` pairs
        actually removed.
        """
        banned = sorted(collect(HIDDEN_PERMISSIONS))
        if not banned:
            return []

        role_ids = [
            role_id for (role_id,) in
            db.session.query(RolePermission.role_id)
            .filter(RolePermission.permission.in_(banned))
            .distinct()
            .order_by(RolePermission.role_id)
        ]

        removed: List[Tuple[str, str]] = []
        for role_id in role_ids:
            role = db.session.get(Role, role_id)
            revoked = [name for name in sorted(role.permission_names() & set(banned)) if role.revoke(name)]
            role_name = role.name
            try:
                db.session.commit()
            except SQLAlchemyError as e:
                db.session.rollback()
                logger.error("Could not save role '%s' while revoking %s: %s", role_name, revoked, e)
                continue
            for name in revoked:
                logger.info("Revoked permission '%s' from role '%s'.", name, role_name)
                removed.append((role_name, name))
        return removed

    # --- Forms ---

    @staticmethod
    def block_risky_form(form) -> bool:
        """Deny access to a declared risky form and make its submission fail."""
        if not form.form_id or form.form_id not in collect(RISKY_FORMS):
            return False
        form.deny_access(TAINTED_FORM_MESSAGE)
        form.add_form_validator(_reject_tainted_form)
        return True

    @staticmethod
    def validate_permissions_submission(form) -> bool:
        """Reject granting a restricted permission to anonymous or authenticated users."""
        restricted = set(restricted_permissions())
        valid = True
        for role_id, permission, field in form.iter_grants():
            if role_id not in BROAD_ROLE_IDS or permission not in restricted or not field.data:
                continue
            role_label = Role.BUILTIN_ROLES[role_id]
            field.errors.append(
                f"The '{permission}' permission is restricted and cannot be granted to the {role_label} role."
            )
            valid = False
        return valid
