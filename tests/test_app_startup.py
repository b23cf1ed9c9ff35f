from flask_login import current_user

from paranoia_app.models import AnonymousUser, Role, db


def test_visitors_get_the_anonymous_role(app):
    assert app.login_manager.anonymous_user is AnonymousUser

    with app.test_request_context('/'):
        assert isinstance(current_user._get_current_object(), AnonymousUser)
        assert current_user.role_ids() == {Role.ANONYMOUS_ID}


def test_anonymous_visitor_is_sent_to_login(app, client):
    response = client.get('/admin/paranoia/')

    assert response.status_code == 302
    assert '/auth/login' in response.headers['Location']


def test_startup_creates_builtin_roles(app):
    assert {role_id for (role_id,) in db.session.query(Role.role_id)} >= set(Role.BUILTIN_ROLES)
