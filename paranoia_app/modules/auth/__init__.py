# File: paranoia_app/modules/auth/__init__.py
from flask import Blueprint

auth_bp = Blueprint('auth', __name__)


def setup_module(app):
    from .routes.views import register_session_tracking

    register_session_tracking(app)


from . import routes  # noqa: E402,F401
