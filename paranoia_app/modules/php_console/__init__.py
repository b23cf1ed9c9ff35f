# File: paranoia_app/modules/php_console/__init__.py
# Demo collaborator: a code-evaluation console of the kind hardening must switch off.

from flask import Blueprint

php_console_bp = Blueprint('php_console', __name__)

from . import routes  # noqa: E402,F401
