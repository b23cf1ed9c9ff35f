# File: paranoia_app/core/decorators.py
from functools import wraps

from flask_login import current_user

from .error_handlers import PermissionDeniedError
from .extensions import login_manager


def require_permission(permission: str):
    """Decorator: visitors are sent to login, members without the permission get a 403."""

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if current_user.has_permission(permission):
                return f(*args, **kwargs)
            if not current_user.is_authenticated:
                return login_manager.unauthorized()
            raise PermissionDeniedError(permission, message=f"Missing permission '{permission}'.")
        return decorated_function
    return decorator
