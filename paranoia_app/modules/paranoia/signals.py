"""
Policy contracts.

Any module declares what must be hidden or disabled by connecting a receiver
to one of these signals. Receivers take the sender and return their
declaration; replies from all receivers are merged into one set.

    from paranoia_app.modules.paranoia.signals import hide_permissions

    @hide_permissions.connect
    def my_dangerous_permissions(sender):
        return ['execute php code']
"""
from blinker import Namespace

_signals = Namespace()

# Reply: mapping of module config key -> category label
hide_modules = _signals.signal('paranoia.hide_modules')

# Reply: iterable of permission names
hide_permissions = _signals.signal('paranoia.hide_permissions')

# Reply: iterable of URL paths (a path also hides everything below it)
hide_paths = _signals.signal('paranoia.hide_paths')

# Reply: iterable of module config keys that must be switched off
disable_modules = _signals.signal('paranoia.disable_modules')

# Reply: iterable of form ids that must never be displayed or submitted
risky_forms = _signals.signal('paranoia.risky_forms')
