"""Hardening declarations for the devel module's own capabilities."""

from paranoia_app.modules.paranoia import signals


def devel_hide_permissions(sender):
    return ['execute php code', 'switch users']


def devel_hide_paths(sender):
    return ['/devel/php']


def devel_risky_forms(sender):
    return ['devel_execute_form']


def connect_policy():
    signals.hide_permissions.connect(devel_hide_permissions)
    signals.hide_paths.connect(devel_hide_paths)
    signals.risky_forms.connect(devel_risky_forms)
