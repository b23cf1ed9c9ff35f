import logging

import pytest

from paranoia_app.models import AuthSession, db
from paranoia_app.modules.paranoia.services import invalidate_other_sessions


@pytest.fixture
def alice(make_user):
    return make_user('alice')


def _session_count(user):
    return AuthSession.query.filter_by(user_id=user.user_id).count()


def _change_password(client, user, new_password='new-secret'):
    return client.post(f'/profile/{user.user_id}/edit', data={
        'username': user.username,
        'email': user.email,
        'current_password': 'password',
        'password': new_password,
    })


def test_other_sessions_are_deleted(app, alice):
    for sid in ('keep', 'other-1', 'other-2'):
        db.session.add(AuthSession(session_id=sid, user_id=alice.user_id))
    db.session.commit()

    assert invalidate_other_sessions(alice, 'keep') == 2
    assert [s.session_id for s in AuthSession.query.filter_by(user_id=alice.user_id)] == ['keep']


def test_custom_session_backend_logs_critical(app, alice, caplog):
    for sid in ('keep', 'other'):
        db.session.add(AuthSession(session_id=sid, user_id=alice.user_id))
    db.session.commit()

    with caplog.at_level(logging.INFO, logger='paranoia_app.paranoia'):
        deleted = invalidate_other_sessions(alice, 'keep', backend='redis')

    assert deleted == 0
    assert _session_count(alice) == 2
    critical = [r for r in caplog.records if r.levelno == logging.CRITICAL]
    assert len(critical) == 1
    assert 'redis' in critical[0].getMessage()


def test_password_change_logs_out_other_browsers(app, alice, login):
    browser_a, browser_b = app.test_client(), app.test_client()
    login(browser_a, 'alice')
    login(browser_b, 'alice')
    assert _session_count(alice) == 2

    assert _change_password(browser_a, alice).status_code == 302

    assert _session_count(alice) == 1
    assert browser_a.get(f'/profile/{alice.user_id}').status_code == 200
    response = browser_b.get(f'/profile/{alice.user_id}')
    assert response.status_code == 302
    assert '/auth/login' in response.headers['Location']


def test_password_change_with_custom_backend_keeps_sessions(app, alice, login, caplog):
    app.config['SESSION_BACKEND'] = 'memcache'
    browser_a, browser_b = app.test_client(), app.test_client()
    login(browser_a, 'alice')
    login(browser_b, 'alice')

    with caplog.at_level(logging.INFO, logger='paranoia_app.paranoia'):
        assert _change_password(browser_a, alice).status_code == 302

    assert _session_count(alice) == 2
    assert len([r for r in caplog.records if r.levelno == logging.CRITICAL]) == 1
    assert browser_b.get(f'/profile/{alice.user_id}').status_code == 200


def test_profile_changes_without_password_keep_sessions(app, alice, login):
    browser_a, browser_b = app.test_client(), app.test_client()
    login(browser_a, 'alice')
    login(browser_b, 'alice')

    response = browser_a.post(f'/profile/{alice.user_id}/edit', data={
        'username': 'alice',
        'email': 'alice@example.com',
    })

    assert response.status_code == 302
    assert _session_count(alice) == 2
