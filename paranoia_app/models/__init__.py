"""Database models package for Paranoia."""

from ..core.extensions import db

from .user import AnonymousUser, AuthSession, Role, RolePermission, User, user_roles
from .app_settings import AppSettings
from .system import QueueItem

__all__ = [
    'db',
    'User',
    'Role',
    'RolePermission',
    'AuthSession',
    'AnonymousUser',
    'user_roles',
    'AppSettings',
    'QueueItem',
]
