"""
Admin Service - build and save the administration forms.
"""
from typing import Dict, List, Optional, Tuple

from paranoia_app.core.extensions import db
from paranoia_app.core.logging_config import get_logger
from paranoia_app.core.module_registry import (
    all_permissions,
    disable_modules,
    enable_modules,
    is_module_enabled,
    list_modules,
)
from paranoia_app.models import Role

from ..forms import ModulesForm, PermissionsForm

logger = get_logger('admin')


class AdminService:

    @staticmethod
    def build_modules_form(**kwargs) -> ModulesForm:
        modules = list_modules()
        data = {ModulesForm.FIELD_PREFIX + m.config_key: is_module_enabled(m.config_key) for m in modules}
        return ModulesForm.build(modules, data=data, **kwargs)

    @staticmethod
    def save_module_states(form: ModulesForm, user_id: Optional[int] = None) -> Tuple[List[str], List[str]]:
        """Apply the submitted switches. Modules absent from the form are left alone.

        Returns ``(enabled, disabled)`` config keys that actually changed.
        """
        to_enable, to_disable = [], []
        modules = {m.config_key: m for m in list_modules()}
        for key, wanted in form.module_states().items():
            module = modules.get(key)
            if module is None or module.is_core:
                continue
            if wanted and not is_module_enabled(key):
                to_enable.append(key)
            elif not wanted and is_module_enabled(key):
                to_disable.append(key)

        disabled = disable_modules(to_disable, user_id=user_id) if to_disable else []
        enabled = enable_modules(to_enable, user_id=user_id) if to_enable else []
        return enabled, disabled

    @staticmethod
    def list_roles() -> List[Role]:
        return Role.query.order_by(Role.weight, Role.role_id).all()

    @classmethod
    def build_permissions_form(cls, **kwargs) -> PermissionsForm:
        roles = cls.list_roles()
        permissions = sorted(all_permissions())
        data = {}
        for index, permission in enumerate(permissions):
            for role in roles:
                data[f'perm__{role.role_id}__{index}'] = role.has_permission(permission)
        return PermissionsForm.build(roles, permissions, data=data, **kwargs)

    @staticmethod
    def save_permissions(form: PermissionsForm) -> Dict[str, int]:
        """Persist the matrix. Permissions removed from the form are left alone."""
        catalogue = all_permissions()
        granted = revoked = 0
        roles = {}
        for role_id, permission, field in form.iter_grants():
            role = roles.get(role_id) or db.session.get(Role, role_id)
            if role is None:
                continue
            roles[role_id] = role
            module = catalogue.get(permission, (None, None))[0]
            if field.data:
                if role.grant(permission, module=module.config_key if module else None):
                    granted += 1
            elif role.revoke(permission):
                revoked += 1
        db.session.commit()
        logger.info("Permissions saved: %d granted, %d revoked.", granted, revoked)
        return {'granted': granted, 'revoked': revoked}
