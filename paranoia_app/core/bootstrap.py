"""Bootstrap helpers for configuring the Flask application."""

from __future__ import annotations

import os

import click
from flask import Flask
from flask_login import current_user

from .error_handlers import register_error_handlers
from .extensions import csrf_protect, db, login_manager, scheduler
from .logging_config import setup_logging
from .module_registry import all_permissions, register_default_modules
from .signals import app_ready


def configure_logging(app: Flask) -> None:
    """Configure application logging."""

    setup_logging(
        app,
        log_level=app.config.get("LOG_LEVEL", "INFO"),
        log_dir=app.config.get("LOG_DIR"),
    )
    app.logger.info("Flask app logger configured successfully.")


def register_extensions(app: Flask) -> None:
    """Initialize shared extensions with the Flask app instance."""

    from ..models import AnonymousUser

    db.init_app(app)
    login_manager.init_app(app)
    login_manager.anonymous_user = AnonymousUser
    csrf_protect.init_app(app)
    register_error_handlers(app)


def register_scheduler(app: Flask) -> None:
    """Start APScheduler and register the cron job."""

    if not app.config.get("SCHEDULER_ENABLED", True):
        app.logger.info("Scheduler disabled by configuration.")
        return
    if app.debug and os.environ.get("WERKZEUG_RUN_MAIN") != "true":
        return

    from apscheduler.schedulers import SchedulerAlreadyRunningError

    def _cron_job():
        from .cron import run_cron

        with scheduler.app.app_context():
            run_cron()

    try:
        scheduler.init_app(app)
        if not scheduler.get_job("cron"):
            scheduler.add_job(
                id="cron",
                func=_cron_job,
                trigger="interval",
                minutes=app.config.get("CRON_INTERVAL_MINUTES", 60),
                replace_existing=True,
            )
        if not scheduler.running:
            scheduler.start()
        app.logger.info("Registered cron job (every %s minutes).", app.config.get("CRON_INTERVAL_MINUTES", 60))
    except SchedulerAlreadyRunningError:
        app.logger.info("Scheduler already running, skipping re-initialisation.")


def register_context_processors(app: Flask) -> None:
    """Register global template context processors."""

    @login_manager.user_loader
    def load_user(user_id: str):
        from ..models import User

        return db.session.get(User, int(user_id))

    @app.context_processor
    def inject_user() -> dict[str, object]:
        return {"current_user": current_user}


def register_blueprints(app: Flask) -> None:
    """Register all default blueprints with the app."""

    register_default_modules(app)


def register_cli_commands(app: Flask) -> None:
    """Register maintenance commands on ``flask``."""

    @app.cli.command("cron")
    def cron_command():
        """Run cron once: fire cron_tick and drain the queues."""
        from .cron import run_cron

        results = run_cron()
        for name, count in results.items():
            click.echo(f"{name}: {count} item(s) processed")


def initialize_database(app: Flask) -> None:
    """Create database tables and ensure the default data exists."""

    from ..models import Role, User

    db.create_all()

    created_roles = set()
    for role_id, name in Role.BUILTIN_ROLES.items():
        if db.session.get(Role, role_id) is None:
            db.session.add(Role(role_id=role_id, name=name, weight=role_id))
            created_roles.add(role_id)
    db.session.flush()

    administrator = db.session.get(Role, Role.ADMINISTRATOR_ID)
    if Role.ADMINISTRATOR_ID in created_roles:
        for name, (module, _permission) in all_permissions().items():
            administrator.grant(name, module=module.config_key)

    if db.session.get(User, User.OWNER_ID) is None:
        owner = User(
            user_id=User.OWNER_ID,
            username=app.config.get("OWNER_USERNAME", "admin"),
            email=app.config.get("OWNER_EMAIL", "admin@example.com"),
        )
        owner.set_password(app.config.get("OWNER_PASSWORD", "admin"))
        owner.roles.append(administrator)
        db.session.add(owner)
        app.logger.info("Created default owner account (uid 1).")

    db.session.commit()

    app_ready.send(app)
