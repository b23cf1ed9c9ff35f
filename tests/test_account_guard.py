import pytest

from paranoia_app.models import Role, User, db
from paranoia_app.modules.paranoia.services import OWNER_PROTECTED_FIELDS, guard_owner_account
from paranoia_app.modules.user_profile.forms import ProfileEditForm


@pytest.fixture
def owner(app):
    return db.session.get(User, User.OWNER_ID)


@pytest.fixture
def site_admin(make_user):
    return make_user('site_admin', roles=[Role.ADMINISTRATOR_ID])


def test_owner_fields_locked_for_other_accounts(app, owner, site_admin):
    with app.test_request_context('/profile/1/edit'):
        form = ProfileEditForm(target_user=owner, acting_user=site_admin)

        for name in OWNER_PROTECTED_FIELDS:
            assert not form.is_field_editable(name), name
            assert form[name].render_kw.get('disabled') is True


def test_owner_fields_editable_for_the_owner(app, owner):
    with app.test_request_context('/profile/1/edit'):
        form = ProfileEditForm(target_user=owner, acting_user=owner)

        for name in OWNER_PROTECTED_FIELDS:
            assert form.is_field_editable(name), name


def test_other_accounts_are_not_guarded(app, site_admin, make_user):
    member = make_user('member')
    with app.test_request_context('/profile/2/edit'):
        form = ProfileEditForm(target_user=member, acting_user=site_admin)

        assert guard_owner_account(form, site_admin, member) is False
        assert all(form.is_field_editable(name) for name in OWNER_PROTECTED_FIELDS)


def test_submitted_owner_changes_are_ignored(app, client, login, owner, site_admin):
    login(client, 'site_admin')

    response = client.post('/profile/1/edit', data={
        'username': 'hijacked',
        'email': 'attacker@example.com',
        'password': 'takeover1',
    })

    assert response.status_code == 302
    owner = db.session.get(User, User.OWNER_ID)
    assert owner.username == 'admin'
    assert owner.email == 'admin@example.com'
    assert owner.check_password('admin')


def test_owner_can_change_own_password(app, client, login):
    login(client, 'admin', 'admin')

    response = client.post('/profile/1/edit', data={
        'username': 'admin',
        'email': 'admin@example.com',
        'current_password': 'admin',
        'password': 'better-secret',
    })

    assert response.status_code == 302
    assert db.session.get(User, User.OWNER_ID).check_password('better-secret')


def test_own_password_change_requires_current_password(app, client, login, make_user):
    member = make_user('member')
    login(client, 'member')

    response = client.post(f'/profile/{member.user_id}/edit', data={
        'username': 'member',
        'email': 'member@example.com',
        'current_password': 'wrong',
        'password': 'new-secret',
    })

    assert response.status_code == 200
    assert db.session.get(User, member.user_id).check_password('password')


def test_locked_owner_fields_pass_validation(app, owner, site_admin):
    with app.test_request_context('/profile/1/edit', method='POST', data={
        'username': 'hijacked',
        'email': 'attacker@example.com',
        'password': 'x',
    }):
        form = ProfileEditForm(target_user=owner, acting_user=site_admin)

        assert form.validate(), form.errors
        assert form.password.errors == []
        assert not set(OWNER_PROTECTED_FIELDS) & set(form.editable_data())
