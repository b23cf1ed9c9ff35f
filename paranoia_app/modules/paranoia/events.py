"""
Event Handlers for the Paranoia Module.

Listens to host lifecycle signals and applies the collected policy. A failing
handler logs and returns; it never breaks the request that fired the signal.
"""
from flask import abort, current_app, request

from paranoia_app.core.cron import register_queue_worker
from paranoia_app.core.logging_config import get_logger
from paranoia_app.core.mail import register_mail_template
from paranoia_app.core.signals import app_ready, cron_tick, form_built, modules_enabled, user_updated

from .config import ParanoiaDefaultConfig
from .logics.defaults import connect_default_declarations
from .services import (
    PolicyEnforcer,
    StaleAccountService,
    guard_owner_account,
    invalidate_other_sessions,
    migrate_legacy_settings,
)
from .services.stale_account_service import build_expired_mail

logger = get_logger('paranoia')


def _enforce_stored_state():
    PolicyEnforcer.enforce_disabled_modules()
    PolicyEnforcer.strip_risky_permissions()


def on_app_ready(sender, **kwargs):
    """Migrate legacy settings and correct module/permission state at startup."""
    try:
        migrate_legacy_settings()
        _enforce_stored_state()
    except Exception as e:
        logger.error(f"Startup enforcement failed: {e}", exc_info=True)


def on_modules_enabled(sender, modules=None, **kwargs):
    """Newly enabled modules may bring dangerous permissions or modules back."""
    try:
        _enforce_stored_state()
    except Exception as e:
        logger.error(f"Enforcement after enabling {modules} failed: {e}", exc_info=True)


def on_form_built(form, form_id=None, **kwargs):
    try:
        PolicyEnforcer.block_risky_form(form)

        if form_id == 'admin_modules':
            PolicyEnforcer.hide_module_entries(form)
        elif form_id == 'admin_permissions':
            PolicyEnforcer.hide_permission_entries(form)
            form.add_form_validator(PolicyEnforcer.validate_permissions_submission)
        elif form_id == 'user_profile_form':
            guard_owner_account(form, getattr(form, 'acting_user', None), getattr(form, 'target_user', None))
    except Exception as e:
        logger.error(f"Altering form '{form_id}' failed: {e}", exc_info=True)


def on_user_updated(sender, user=None, changes=None, session_id=None, **kwargs):
    """A password change ends every other session of that account."""
    if user is None or 'password' not in (changes or ()):
        return
    try:
        invalidate_other_sessions(
            user,
            keep_session_id=session_id,
            backend=current_app.config.get('SESSION_BACKEND', 'database'),
        )
    except Exception as e:
        logger.error(f"Session invalidation for uid {user.user_id} failed: {e}", exc_info=True)


def on_cron_tick(sender, now=None, **kwargs):
    try:
        StaleAccountService.enqueue_stale_accounts(now)
    except Exception as e:
        logger.error(f"Queueing stale accounts failed: {e}", exc_info=True)
    try:
        _enforce_stored_state()
    except Exception as e:
        logger.error(f"Cron enforcement failed: {e}", exc_info=True)


def register_events(app):
    """Connect signals, the queue worker and the mail template."""
    connect_default_declarations()

    app_ready.connect(on_app_ready)
    modules_enabled.connect(on_modules_enabled)
    form_built.connect(on_form_built)
    user_updated.connect(on_user_updated)
    cron_tick.connect(on_cron_tick)

    register_queue_worker(
        ParanoiaDefaultConfig.RESET_QUEUE,
        StaleAccountService.reset_account,
        time_limit=app.config.get('PARANOIA_QUEUE_TIME_LIMIT', ParanoiaDefaultConfig.QUEUE_TIME_LIMIT),
    )
    register_mail_template(ParanoiaDefaultConfig.EXPIRED_MAIL_KEY, build_expired_mail)


def register_path_guard(app):
    @app.before_request
    def block_hidden_paths():
        if PolicyEnforcer.is_path_hidden(request.path):
            abort(404)
