"""Core helpers for wiring application components together."""

from .module_registry import (
    DEFAULT_MODULES,
    ModuleDefinition,
    all_permissions,
    get_module,
    is_module_enabled,
    list_modules,
    register_default_modules,
    register_modules,
    set_module_enabled,
)

__all__ = [
    "DEFAULT_MODULES",
    "ModuleDefinition",
    "all_permissions",
    "get_module",
    "is_module_enabled",
    "list_modules",
    "register_default_modules",
    "register_modules",
    "set_module_enabled",
]
