from paranoia_app.core.module_registry import all_permissions, enable_modules, is_module_enabled, set_module_enabled
from paranoia_app.models import AppSettings, Role, db
from paranoia_app.modules.admin.forms import PermissionsForm
from paranoia_app.modules.paranoia.services import PolicyEnforcer
from paranoia_app.modules.paranoia.services.enforcement_service import TAINTED_FORM_MESSAGE
from paranoia_app.modules.php_console.forms import PhpEvalForm


def _role_state():
    return {role.role_id: sorted(role.permission_names()) for role in Role.query.all()}


def test_startup_disables_declared_modules_and_strips_permissions(app):
    administrator = db.session.get(Role, Role.ADMINISTRATOR_ID)

    assert not is_module_enabled('php_console')
    assert is_module_enabled('devel')
    assert not administrator.has_permission('use PHP for settings')
    assert not administrator.has_permission('execute php code')
    assert administrator.has_permission('administer paranoia')


def test_strip_risky_permissions_is_idempotent(app):
    authenticated = db.session.get(Role, Role.AUTHENTICATED_ID)
    administrator = db.session.get(Role, Role.ADMINISTRATOR_ID)
    authenticated.grant('use PHP for settings')
    authenticated.grant('access devel information')
    administrator.grant('execute php code')
    administrator.grant('switch users')
    db.session.commit()

    removed = PolicyEnforcer.strip_risky_permissions()
    state_after_first = _role_state()

    assert sorted(removed) == [
        ('administrator', 'execute php code'),
        ('administrator', 'switch users'),
        ('authenticated user', 'use PHP for settings'),
    ]
    assert PolicyEnforcer.strip_risky_permissions() == []
    assert _role_state() == state_after_first
    assert 'access devel information' in state_after_first[Role.AUTHENTICATED_ID]


def test_disabled_module_notice_exactly_once(app):
    # Switched back on behind the UI's back
    set_module_enabled('php_console', True)
    db.session.commit()
    assert is_module_enabled('php_console')

    notices = []
    assert PolicyEnforcer.enforce_disabled_modules(notify=notices.append) == ['php_console']
    assert len(notices) == 1
    assert 'PHP console' in notices[0]
    assert not is_module_enabled('php_console')

    assert PolicyEnforcer.enforce_disabled_modules(notify=notices.append) == []
    assert len(notices) == 1


def test_enabling_a_disabled_module_is_undone(app):
    enable_modules(['php_console'])

    assert not is_module_enabled('php_console')
    assert AppSettings.get('MODULE_ENABLED_php_console') is False


def test_cron_reverts_direct_database_grants(app):
    from paranoia_app.core.cron import run_cron

    anonymous = db.session.get(Role, Role.ANONYMOUS_ID)
    anonymous.grant('use PHP for block visibility')
    db.session.commit()

    run_cron()

    assert not db.session.get(Role, Role.ANONYMOUS_ID).has_permission('use PHP for block visibility')


def test_risky_form_is_locked(app):
    with app.test_request_context('/php/', method='POST', data={'code': 'phpinfo();'}):
        form = PhpEvalForm()

        assert form.access_granted is False
        assert form.validate() is False
        assert TAINTED_FORM_MESSAGE in form.form_errors


def test_hidden_paths_answer_404(app, client, login):
    login(client, 'admin', 'admin')

    assert client.get('/devel/').status_code == 200
    assert client.get('/devel/php').status_code == 404
    assert client.get('/devel/php/extra').status_code == 404
    assert client.get('/php/').status_code == 404


def test_module_list_hides_declared_modules(app, client, login):
    login(client, 'admin', 'admin')

    html = client.get('/admin/modules').get_data(as_text=True)

    assert 'module__devel' in html
    assert 'module__paranoia' not in html
    assert 'module__php_console' not in html


def test_module_list_save_leaves_hidden_modules_alone(app, client, login):
    login(client, 'admin', 'admin')

    # devel left unchecked: switched off. Hidden paranoia is not part of the form.
    response = client.post('/admin/modules', data={'submit': 'Save configuration'})

    assert response.status_code == 302
    assert not is_module_enabled('devel')
    assert is_module_enabled('paranoia')


def test_permission_matrix_hides_declared_permissions(app, client, login):
    login(client, 'admin', 'admin')

    html = client.get('/admin/permissions').get_data(as_text=True)

    assert 'administer paranoia' in html
    assert 'use PHP for settings' not in html
    assert 'execute php code' not in html


def test_permission_matrix_grants_belong_to_each_built_form(app):
    roles = [db.session.get(Role, Role.AUTHENTICATED_ID)]
    with app.test_request_context('/admin/permissions'):
        first = PermissionsForm.build(roles, ['administer modules'])
        second = PermissionsForm.build(roles, ['access devel information'])

        assert first.permission_names() == ['administer modules']
        assert second.permission_names() == ['access devel information']
    assert PermissionsForm._grants is None


def _grant_field(role_id, permission):
    return f'perm__{role_id}__{sorted(all_permissions()).index(permission)}'


def test_restricted_grant_to_broad_roles_is_rejected(app, client, login):
    login(client, 'admin', 'admin')

    for role_id in (Role.ANONYMOUS_ID, Role.AUTHENTICATED_ID):
        response = client.post('/admin/permissions', data={_grant_field(role_id, 'administer modules'): 'y'})

        assert response.status_code == 200
        assert 'is restricted and cannot be granted' in response.get_data(as_text=True)
        assert not db.session.get(Role, role_id).has_permission('administer modules')


def test_unrestricted_grant_is_saved(app, client, login):
    login(client, 'admin', 'admin')

    response = client.post(
        '/admin/permissions',
        data={_grant_field(Role.AUTHENTICATED_ID, 'access devel information'): 'y'},
    )

    assert response.status_code == 302
    assert db.session.get(Role, Role.AUTHENTICATED_ID).has_permission('access devel information')


def test_restricted_grant_to_administrator_is_allowed(app, client, login):
    login(client, 'admin', 'admin')

    response = client.post(
        '/admin/permissions',
        data={_grant_field(Role.ADMINISTRATOR_ID, 'administer modules'): 'y'},
    )

    assert response.status_code == 302
    assert db.session.get(Role, Role.ADMINISTRATOR_ID).has_permission('administer modules')
