import logging

import pytest

from paranoia_app.modules.paranoia import signals
from paranoia_app.modules.paranoia.logics.registry import (
    DISABLED_MODULES,
    HIDDEN_MODULES,
    HIDDEN_PATHS,
    HIDDEN_PERMISSIONS,
    RISKY_FORMS,
    collect,
    collect_all,
)


@pytest.fixture
def connect_receiver():
    connected = []

    def _connect(signal, receiver):
        signal.connect(receiver, weak=False)
        connected.append((signal, receiver))
        return receiver

    yield _connect
    for signal, receiver in connected:
        signal.disconnect(receiver)


def test_collect_merges_declarations_of_every_collaborator(app):
    permissions = collect(HIDDEN_PERMISSIONS)

    # Paranoia's own declarations
    assert 'use PHP for settings' in permissions
    assert 'use PHP for block visibility' in permissions
    # Declared by the devel module
    assert 'execute php code' in permissions
    assert 'switch users' in permissions
    assert 'administer paranoia' not in permissions


def test_duplicates_collapse_and_mapping_keys_count(app, connect_receiver):
    connect_receiver(signals.hide_permissions, lambda sender: ['use PHP for settings', 'use PHP for settings'])
    connect_receiver(signals.hide_modules, lambda sender: {'devel': 'development'})

    permissions = collect(HIDDEN_PERMISSIONS)
    assert sorted(permissions).count('use PHP for settings') == 1
    assert collect(HIDDEN_MODULES) == {'paranoia', 'php_console', 'devel'}


def test_bare_string_and_blank_items(app, connect_receiver):
    connect_receiver(signals.risky_forms, lambda sender: 'single_form')
    connect_receiver(signals.risky_forms, lambda sender: ['listed_form', '  '])

    forms = collect(RISKY_FORMS)
    assert {'single_form', 'listed_form', 'php_eval_form', 'devel_execute_form'} <= forms
    assert '' not in forms


def test_reply_with_non_string_items_is_skipped_whole(app, connect_receiver, caplog):
    connect_receiver(signals.risky_forms, lambda sender: ['half_declared_form', 42])

    with caplog.at_level(logging.WARNING, logger='paranoia_app.paranoia'):
        forms = collect(RISKY_FORMS)

    assert 'half_declared_form' not in forms
    assert forms == {'php_eval_form', 'devel_execute_form'}
    warnings = [r for r in caplog.records if r.name == 'paranoia_app.paranoia' and r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert '42' in warnings[0].getMessage()


def test_failing_collaborator_is_skipped_with_warning(app, connect_receiver, caplog):
    def broken(sender):
        raise RuntimeError('collaborator exploded')

    connect_receiver(signals.disable_modules, broken)
    connect_receiver(signals.disable_modules, lambda sender: 12345)

    with caplog.at_level(logging.WARNING, logger='paranoia_app.paranoia'):
        modules = collect(DISABLED_MODULES)

    assert modules == {'php_console'}
    warnings = [r for r in caplog.records if r.name == 'paranoia_app.paranoia' and r.levelno == logging.WARNING]
    assert len(warnings) == 2
    assert any('collaborator exploded' in r.getMessage() for r in warnings)


def test_hidden_paths_are_normalized(app, connect_receiver):
    connect_receiver(signals.hide_paths, lambda sender: ['admin/config/php/', ' /node/add '])

    paths = collect(HIDDEN_PATHS)
    assert {'/php', '/devel/php', '/admin/config/php', '/node/add'} <= paths


def test_unknown_category_is_a_programming_error(app):
    with pytest.raises(ValueError):
        collect('hidden_everything')


def test_collect_all_reports_every_category(app):
    policy = collect_all()
    assert set(policy) == {HIDDEN_MODULES, HIDDEN_PERMISSIONS, HIDDEN_PATHS, DISABLED_MODULES, RISKY_FORMS}
    assert policy[DISABLED_MODULES] == {'php_console'}
