# File: paranoia_app/modules/paranoia/__init__.py
# Security hardening: hides and disables dangerous capabilities that other
# modules expose, and locks the passwords of long-unused accounts.

from flask import Blueprint

paranoia_bp = Blueprint('paranoia', __name__)


def setup_module(app):
    """
    Initialize the Paranoia module.
    1. Connect lifecycle listeners and its own policy declarations.
    2. Register the cron queue worker and the mail template.
    3. Guard hidden paths and register CLI commands.
    """
    from .events import register_events, register_path_guard
    from .commands import register_commands

    register_events(app)
    register_path_guard(app)
    register_commands(app)

    app.logger.info("Paranoia Module Initialized.")


from . import routes  # noqa: E402,F401
