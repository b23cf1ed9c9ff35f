"""
Central Signal Registry for host lifecycle events.

Uses blinker so that modules can react to what the host does without the
host importing them.

Usage:
    # Publisher (sender)
    from paranoia_app.core.signals import modules_enabled
    modules_enabled.send(current_app._get_current_object(), modules=['devel'])

    # Subscriber (receiver) - in module's events.py
    @modules_enabled.connect
    def on_modules_enabled(sender, **kwargs):
        ...
"""
from blinker import Namespace

# ============================================
# Module Lifecycle Signals
# ============================================
module_signals = Namespace()

# Signal: Fired once at startup, after tables and default data exist
# Sender: the Flask app
app_ready = module_signals.signal('app_ready')

# Signal: Fired after one or more modules were switched on
# Payload: modules (list[str] of config keys)
modules_enabled = module_signals.signal('modules_enabled')

# Signal: Fired after one or more modules were switched off
# Payload: modules (list[str] of config keys)
modules_disabled = module_signals.signal('modules_disabled')

# ============================================
# Form Signals
# ============================================
form_signals = Namespace()

# Signal: Fired when a HookedForm has been constructed, before validation
# Sender: the form instance. Payload: form_id (str)
form_built = form_signals.signal('form_built')

# ============================================
# User Signals
# ============================================
user_signals = Namespace()

# Signal: Fired after a new account was created
# Payload: user
user_registered = user_signals.signal('user_registered')

# Signal: Fired after an account record was saved
# Payload: user, changes (list[str]), acting_user, session_id (str | None)
user_updated = user_signals.signal('user_updated')

# ============================================
# Cron Signals
# ============================================
cron_signals = Namespace()

# Signal: Fired once per cron run, before queues are drained
# Payload: now (datetime, UTC)
cron_tick = cron_signals.signal('cron_tick')
