"""User, role and session related database models."""

from __future__ import annotations

from typing import Iterable, Set

from flask_login import AnonymousUserMixin, UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from ..core.extensions import db
from ..utils.time_utils import utcnow

# A stored credential starting with this prefix never verifies.
LOCKED_HASH_PREFIX = '!'

user_roles = db.Table(
    'user_roles',
    db.Column('user_id', db.Integer, db.ForeignKey('users.user_id'), primary_key=True),
    db.Column('role_id', db.Integer, db.ForeignKey('roles.role_id'), primary_key=True),
)


class Role(db.Model):
    """A named set of permissions."""

    __tablename__ = 'roles'

    ANONYMOUS_ID = 1
    AUTHENTICATED_ID = 2
    ADMINISTRATOR_ID = 3
    BUILTIN_ROLES = {
        ANONYMOUS_ID: 'anonymous user',
        AUTHENTICATED_ID: 'authenticated user',
        ADMINISTRATOR_ID: 'administrator',
    }

    role_id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), unique=True, nullable=False)
    weight = db.Column(db.Integer, default=0)

    permissions = db.relationship(
        'RolePermission', backref='role', lazy=True, cascade='all, delete-orphan'
    )

    def permission_names(self) -> Set[str]:
        return {grant.permission for grant in self.permissions}

    def has_permission(self, permission: str) -> bool:
        return permission in self.permission_names()

    def grant(self, permission: str, module: str = None) -> bool:
        if self.has_permission(permission):
            return False
        self.permissions.append(RolePermission(permission=permission, module=module))
        return True

    def revoke(self, permission: str) -> bool:
        for grant in list(self.permissions):
            if grant.permission == permission:
                self.permissions.remove(grant)
                return True
        return False

    def __repr__(self) -> str:
        return f'<Role {self.role_id} {self.name}>'


class RolePermission(db.Model):
    """A single permission granted to a role."""

    __tablename__ = 'role_permissions'

    role_id = db.Column(db.Integer, db.ForeignKey('roles.role_id'), primary_key=True)
    permission = db.Column(db.String(128), primary_key=True)
    module = db.Column(db.String(64), nullable=True)


def _permissions_for_roles(role_ids: Iterable[int]) -> Set[str]:
    rows = RolePermission.query.filter(RolePermission.role_id.in_(list(role_ids))).all()
    return {row.permission for row in rows}


class User(UserMixin, db.Model):
    """Application user model."""

    __tablename__ = 'users'

    OWNER_ID = 1

    user_id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    is_blocked = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    last_access = db.Column(db.DateTime(timezone=True), nullable=True)

    roles = db.relationship('Role', secondary=user_roles, lazy='subquery',
                            backref=db.backref('users', lazy=True))
    sessions = db.relationship('AuthSession', backref='user', lazy='dynamic',
                               cascade='all, delete-orphan')

    def get_id(self):
        return str(self.user_id)

    @property
    def is_active(self):
        return not self.is_blocked

    @property
    def is_owner(self) -> bool:
        return self.user_id == self.OWNER_ID

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        if not self.password_hash or self.password_hash.startswith(LOCKED_HASH_PREFIX):
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def is_password_locked(self) -> bool:
        return bool(self.password_hash) and self.password_hash.startswith(LOCKED_HASH_PREFIX)

    def role_ids(self) -> Set[int]:
        return {Role.AUTHENTICATED_ID} | {role.role_id for role in self.roles}

    def has_permission(self, permission: str) -> bool:
        if self.is_owner:
            return True
        return permission in _permissions_for_roles(self.role_ids())


class AnonymousUser(AnonymousUserMixin):
    """Visitor without an account; holds the anonymous role's permissions."""

    user_id = None
    is_owner = False

    def role_ids(self) -> Set[int]:
        return {Role.ANONYMOUS_ID}

    def has_permission(self, permission: str) -> bool:
        return permission in _permissions_for_roles(self.role_ids())


class AuthSession(db.Model):
    """Server-side record of a logged-in browser session."""

    __tablename__ = 'auth_sessions'

    session_id = db.Column(db.String(64), primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=False, index=True)
    ip_address = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    last_seen = db.Column(db.DateTime(timezone=True), default=utcnow)

    def __repr__(self) -> str:
        return f'<AuthSession {self.session_id[:8]} user={self.user_id}>'
