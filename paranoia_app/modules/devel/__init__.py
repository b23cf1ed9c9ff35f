# File: paranoia_app/modules/devel/__init__.py
# Demo collaborator: developer helpers that declare their own dangerous parts.

from flask import Blueprint

devel_bp = Blueprint('devel', __name__)


def setup_module(app):
    from .policy import connect_policy

    connect_policy()


from . import routes  # noqa: E402,F401
