# File: paranoia_app/modules/admin/forms.py
# Administration forms. Their fields depend on installed modules and roles,
# so each request builds a fresh subclass before instantiating it.

from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from wtforms import BooleanField, SubmitField
from wtforms.fields import Field

from paranoia_app.core.forms import HookedForm
from paranoia_app.core.module_registry import ModuleDefinition


class ModulesForm(HookedForm):
    """Enable/disable switch per module."""

    form_id = 'admin_modules'
    FIELD_PREFIX = 'module__'

    submit = SubmitField('Save configuration')

    @classmethod
    def build(cls, modules: Sequence[ModuleDefinition], **kwargs) -> 'ModulesForm':
        attrs = {}
        for module in modules:
            attrs[cls.FIELD_PREFIX + module.config_key] = BooleanField(
                module.display_name or module.config_key,
                description=module.category,
                render_kw={'disabled': True} if module.is_core else None,
            )
        form_class = type('ModulesForm', (cls,), attrs)
        return form_class(**kwargs)

    def module_keys(self) -> List[str]:
        return [name[len(self.FIELD_PREFIX):] for name in self._fields if name.startswith(self.FIELD_PREFIX)]

    def module_field(self, key: str) -> Field:
        return self._fields[self.FIELD_PREFIX + key]

    def remove_module(self, key: str) -> bool:
        return self.remove_field(self.FIELD_PREFIX + key)

    def module_states(self) -> Dict[str, bool]:
        return {key: bool(self.module_field(key).data) for key in self.module_keys()}


class PermissionsForm(HookedForm):
    """Role/permission matrix: one checkbox per (role, permission) pair."""

    form_id = 'admin_permissions'

    submit = SubmitField('Save permissions')

    # field name -> (role_id, permission)
    _grants: Optional[Dict[str, Tuple[int, str]]] = None

    @classmethod
    def build(cls, roles, permissions: Sequence[str], **kwargs) -> 'PermissionsForm':
        attrs = {}
        grants = {}
        for index, permission in enumerate(permissions):
            for role in roles:
                name = f'perm__{role.role_id}__{index}'
                attrs[name] = BooleanField(f'{role.name}: {permission}')
                grants[name] = (role.role_id, permission)
        attrs['_grants'] = grants
        form_class = type('PermissionsForm', (cls,), attrs)
        return form_class(**kwargs)

    def iter_grants(self) -> Iterator[Tuple[int, str, Field]]:
        for name, (role_id, permission) in (self._grants or {}).items():
            field = self._fields.get(name)
            if field is not None:
                yield role_id, permission, field

    def permission_names(self) -> List[str]:
        seen = []
        for _role_id, permission, _field in self.iter_grants():
            if permission not in seen:
                seen.append(permission)
        return seen

    def grant_field(self, role_id: int, permission: str):
        for grant_role_id, grant_permission, field in self.iter_grants():
            if grant_role_id == role_id and grant_permission == permission:
                return field
        return None

    def remove_permission(self, permission: str) -> bool:
        names = [name for name, (_role_id, perm) in (self._grants or {}).items()
                 if perm == permission and name in self._fields]
        for name in names:
            self.remove_field(name)
        return bool(names)
