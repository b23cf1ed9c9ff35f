import pytest
from marshmallow import ValidationError

from paranoia_app.models import AppSettings, Role, db
from paranoia_app.modules.paranoia.config import ParanoiaDefaultConfig
from paranoia_app.modules.paranoia.services import get_settings, migrate_legacy_settings, save_settings

SETTINGS_KEY = ParanoiaDefaultConfig.SETTINGS_KEY
LEGACY_THRESHOLD = ParanoiaDefaultConfig.LEGACY_ACCESS_THRESHOLD_KEY
LEGACY_NOTIFY = ParanoiaDefaultConfig.LEGACY_EMAIL_NOTIFICATION_KEY


def test_defaults(app):
    assert get_settings() == {'access_threshold': 0, 'email_notification': False}


def test_save_and_reload(app):
    save_settings({'access_threshold': 90, 'email_notification': True}, user_id=1)

    assert get_settings() == {'access_threshold': 90, 'email_notification': True}
    assert AppSettings.get(SETTINGS_KEY) == {'access_threshold': 90, 'email_notification': True}


def test_negative_threshold_is_rejected(app):
    with pytest.raises(ValidationError):
        save_settings({'access_threshold': -1})
    assert get_settings()['access_threshold'] == 0


def test_corrupt_record_falls_back_to_defaults(app):
    AppSettings.set(SETTINGS_KEY, {'access_threshold': 'soon'})
    db.session.commit()

    assert get_settings() == {'access_threshold': 0, 'email_notification': False}


def test_legacy_settings_are_migrated_once(app):
    AppSettings.set(LEGACY_THRESHOLD, 60, category='legacy')
    AppSettings.set(LEGACY_NOTIFY, True, category='legacy')
    db.session.commit()

    assert migrate_legacy_settings() is True
    assert get_settings() == {'access_threshold': 60, 'email_notification': True}
    assert not AppSettings.has(LEGACY_THRESHOLD)
    assert not AppSettings.has(LEGACY_NOTIFY)

    assert migrate_legacy_settings() is False


def test_structured_record_wins_over_legacy_keys(app):
    save_settings({'access_threshold': 180})
    AppSettings.set(LEGACY_THRESHOLD, 30, category='legacy')
    db.session.commit()

    assert migrate_legacy_settings() is True
    assert get_settings()['access_threshold'] == 180
    assert not AppSettings.has(LEGACY_THRESHOLD)


def test_migrate_settings_command(app):
    AppSettings.set(LEGACY_THRESHOLD, 365, category='legacy')
    db.session.commit()

    runner = app.test_cli_runner()
    result = runner.invoke(args=['paranoia', 'migrate-settings'])

    assert 'Legacy settings migrated.' in result.output
    assert get_settings()['access_threshold'] == 365

    result = runner.invoke(args=['paranoia', 'migrate-settings'])
    assert 'Nothing to migrate.' in result.output


def test_policy_command_lists_declarations(app):
    result = app.test_cli_runner().invoke(args=['paranoia', 'policy'])

    assert 'disabled_modules: php_console' in result.output
    assert 'devel_execute_form' in result.output


def test_settings_page_requires_permission(app, client, login, make_user):
    assert client.get('/admin/paranoia/').status_code == 302

    make_user('member')
    login(client, 'member')
    assert client.get('/admin/paranoia/').status_code == 403


def test_settings_page_saves(app, client, login):
    login(client, 'admin', 'admin')
    assert client.get('/admin/paranoia/').status_code == 200

    response = client.post('/admin/paranoia/', data={'access_threshold': '90', 'email_notification': 'y'})

    assert response.status_code == 302
    assert get_settings() == {'access_threshold': 90, 'email_notification': True}


def test_settings_page_rejects_unknown_threshold(app, client, login):
    login(client, 'admin', 'admin')

    response = client.post('/admin/paranoia/', data={'access_threshold': '7'})

    assert response.status_code == 200
    assert get_settings()['access_threshold'] == 0


def test_policy_api(app, client, login, make_user):
    login(client, 'admin', 'admin')

    payload = client.get('/admin/paranoia/api/policy').get_json()

    assert payload['success'] is True
    assert payload['data']['disabled_modules'] == ['php_console']
    assert '/devel/php' in payload['data']['hidden_paths']
    assert 'execute php code' in payload['data']['hidden_permissions']


def test_policy_api_denied_for_members(app, client, login, make_user):
    make_user('member', roles=[Role.AUTHENTICATED_ID])
    login(client, 'member')

    response = client.get('/admin/paranoia/api/policy')

    assert response.status_code == 403
    assert response.get_json()['code'] == 'PERMISSION_DENIED'
