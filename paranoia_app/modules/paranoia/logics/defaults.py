"""Policy declarations contributed by the paranoia module itself."""

from .. import signals

# The module hides itself so it can only be switched off outside the UI.
HIDDEN_MODULES = {
    'paranoia': 'paranoia',
    'php_console': 'paranoia',
}

# Well-known code-execution permissions of the module ecosystem.
HIDDEN_PERMISSIONS = (
    'use PHP for settings',
    'use PHP for block visibility',
    'use PHP input for field settings',
)

DISABLED_MODULES = ('php_console',)

HIDDEN_PATHS = ('/php',)

RISKY_FORMS = ('php_eval_form',)


def paranoia_hide_modules(sender):
    return dict(HIDDEN_MODULES)


def paranoia_hide_permissions(sender):
    return list(HIDDEN_PERMISSIONS)


def paranoia_disable_modules(sender):
    return list(DISABLED_MODULES)


def paranoia_hide_paths(sender):
    return list(HIDDEN_PATHS)


def paranoia_risky_forms(sender):
    return list(RISKY_FORMS)


def connect_default_declarations():
    signals.hide_modules.connect(paranoia_hide_modules)
    signals.hide_permissions.connect(paranoia_hide_permissions)
    signals.disable_modules.connect(paranoia_disable_modules)
    signals.hide_paths.connect(paranoia_hide_paths)
    signals.risky_forms.connect(paranoia_risky_forms)
