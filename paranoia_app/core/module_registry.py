"""Utilities for declaratively registering application modules.

The registry describes each blueprint/module with metadata (prefix, display
name, declared permissions) so module discovery, registration and the
enable/disable switch can be automated. A module's switch lives in
``AppSettings`` under ``MODULE_ENABLED_<config_key>``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from flask import Blueprint, Flask, abort, current_app, request
from werkzeug.utils import import_string

from .signals import modules_disabled, modules_enabled


@dataclass(frozen=True)
class PermissionDefinition:
    """A permission a module contributes to the role/permission matrix."""

    name: str
    title: str
    restrict_access: bool = False


@dataclass(frozen=True)
class ModuleDefinition:
    """Describe how a blueprint-backed module is registered with the app."""

    import_path: str
    attribute: str
    config_key: str
    url_prefix: Optional[str] = None
    display_name: Optional[str] = None
    category: str = "Other"
    version: str = "1.0"
    is_core: bool = False
    enabled_by_default: bool = True
    permissions: Tuple[PermissionDefinition, ...] = field(default_factory=tuple)

    def load_blueprint(self) -> Blueprint:
        """Import and return the blueprint described by this definition."""

        module = import_string(self.import_path)
        blueprint = getattr(module, self.attribute, None)
        if not isinstance(blueprint, Blueprint):
            raise TypeError(
                "Expected attribute '%s' in '%s' to be a Flask Blueprint, got %r instead"
                % (self.attribute, self.import_path, type(blueprint))
            )
        return blueprint

    def setup(self, app: Flask) -> None:
        """Run the module's ``setup_module(app)`` hook when it has one."""

        module = import_string(self.import_path)
        setup_module = getattr(module, "setup_module", None)
        if callable(setup_module):
            setup_module(app)


def _setting_key(config_key: str) -> str:
    return f"MODULE_ENABLED_{config_key}"


def register_modules(app: Flask, modules: Sequence[ModuleDefinition]) -> None:
    """Register all modules in the provided iterable with the Flask app."""

    blueprint_owners = app.extensions.setdefault("module_blueprints", {})
    for module in modules:
        blueprint = module.load_blueprint()
        app.register_blueprint(blueprint, url_prefix=module.url_prefix)
        blueprint_owners[blueprint.name] = module.config_key
        module.setup(app)
        app.logger.debug(
            "Registered module %s (version %s) at prefix %s",
            module.import_path,
            module.version,
            module.url_prefix or "<root>",
        )

    @app.before_request
    def block_disabled_modules():
        if not request.blueprint:
            return None
        config_key = app.extensions["module_blueprints"].get(request.blueprint)
        if config_key and not is_module_enabled(config_key):
            abort(404)
        return None


def register_default_modules(app: Flask) -> None:
    """Convenience helper that registers the built-in modules."""

    register_modules(app, DEFAULT_MODULES)


def list_modules() -> List[ModuleDefinition]:
    return list(DEFAULT_MODULES)


def get_module(config_key: str) -> Optional[ModuleDefinition]:
    for module in DEFAULT_MODULES:
        if module.config_key == config_key:
            return module
    return None


def is_module_enabled(config_key: str) -> bool:
    """Return the stored switch for a module; core modules are always on."""

    from ..models import AppSettings

    module = get_module(config_key)
    if module is None:
        return False
    if module.is_core:
        return True
    return bool(AppSettings.get(_setting_key(config_key), module.enabled_by_default))


def set_module_enabled(config_key: str, enabled: bool, user_id: Optional[int] = None) -> bool:
    """Flip a module switch without firing signals.

    Returns True when the stored state actually changed. The caller commits.
    """

    from ..models import AppSettings

    module = get_module(config_key)
    if module is None:
        raise ValueError(f"Unknown module '{config_key}'")
    if module.is_core and not enabled:
        raise ValueError(f"Core module '{config_key}' cannot be disabled")
    if is_module_enabled(config_key) == enabled:
        return False

    AppSettings.set(_setting_key(config_key), bool(enabled), category='module', data_type='bool', user_id=user_id)
    return True


def enable_modules(config_keys: Iterable[str], user_id: Optional[int] = None) -> List[str]:
    """Switch modules on, commit and fire ``modules_enabled`` for the ones that changed."""

    from .extensions import db

    changed = [key for key in config_keys if set_module_enabled(key, True, user_id=user_id)]
    db.session.commit()
    if changed:
        current_app.logger.info("Enabled modules: %s", ", ".join(changed))
        modules_enabled.send(current_app._get_current_object(), modules=changed)
    return changed


def disable_modules(config_keys: Iterable[str], user_id: Optional[int] = None) -> List[str]:
    """Switch modules off, commit and fire ``modules_disabled`` for the ones that changed."""

    from .extensions import db

    changed = [key for key in config_keys if set_module_enabled(key, False, user_id=user_id)]
    db.session.commit()
    if changed:
        current_app.logger.info("Disabled modules: %s", ", ".join(changed))
        modules_disabled.send(current_app._get_current_object(), modules=changed)
    return changed


def all_permissions() -> Dict[str, Tuple[ModuleDefinition, PermissionDefinition]]:
    """Merged permission catalogue keyed by permission name."""

    catalogue: Dict[str, Tuple[ModuleDefinition, PermissionDefinition]] = {}
    for module in DEFAULT_MODULES:
        for permission in module.permissions:
            catalogue[permission.name] = (module, permission)
    return catalogue


def restricted_permissions() -> List[str]:
    return sorted(name for name, (_, perm) in all_permissions().items() if perm.restrict_access)


DEFAULT_MODULES: Tuple[ModuleDefinition, ...] = (
    ModuleDefinition(
        "paranoia_app.modules.auth",
        "auth_bp",
        config_key="auth",
        url_prefix="/auth",
        display_name="Authentication",
        category="System",
        is_core=True,
    ),
    ModuleDefinition(
        "paranoia_app.modules.admin",
        "admin_bp",
        config_key="admin",
        url_prefix="/admin",
        display_name="Administration",
        category="System",
        is_core=True,
        permissions=(
            PermissionDefinition("administer modules", "Administer modules", restrict_access=True),
            PermissionDefinition("administer permissions", "Administer permissions", restrict_access=True),
            PermissionDefinition("administer users", "Administer users", restrict_access=True),
            PermissionDefinition("access administration pages", "Use the administration pages"),
        ),
    ),
    ModuleDefinition(
        "paranoia_app.modules.user_profile",
        "user_profile_bp",
        config_key="user_profile",
        url_prefix="/profile",
        display_name="User profile",
        category="System",
        is_core=True,
        permissions=(
            PermissionDefinition("change own username", "Change own username"),
        ),
    ),
    ModuleDefinition(
        "paranoia_app.modules.paranoia",
        "paranoia_bp",
        config_key="paranoia",
        url_prefix="/admin/paranoia",
        display_name="Paranoia",
        category="Security",
        permissions=(
            PermissionDefinition("administer paranoia", "Administer paranoia", restrict_access=True),
        ),
    ),
    ModuleDefinition(
        "paranoia_app.modules.php_console",
        "php_console_bp",
        config_key="php_console",
        url_prefix="/php",
        display_name="PHP console",
        category="Development",
        permissions=(
            PermissionDefinition("use PHP for settings", "Use PHP for settings", restrict_access=True),
        ),
    ),
    ModuleDefinition(
        "paranoia_app.modules.devel",
        "devel_bp",
        config_key="devel",
        url_prefix="/devel",
        display_name="Devel",
        category="Development",
        permissions=(
            PermissionDefinition("access devel information", "Access developer information"),
            PermissionDefinition("execute php code", "Execute PHP code", restrict_access=True),
            PermissionDefinition("switch users", "Switch users", restrict_access=True),
        ),
    ),
)
