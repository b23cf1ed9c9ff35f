from flask import abort, current_app, flash, redirect, render_template, session, url_for
from flask_login import current_user, login_user

from paranoia_app.core.decorators import require_permission
from paranoia_app.core.extensions import db
from paranoia_app.core.module_registry import is_module_enabled, list_modules
from paranoia_app.models import User
from paranoia_app.modules.auth.services import AuthService
from paranoia_app.modules.auth.services.auth_service import SESSION_KEY

from . import devel_bp as blueprint
from .forms import DevelExecuteForm


@blueprint.route('/', methods=['GET'])
@require_permission('access devel information')
def info():
    modules = [(module, is_module_enabled(module.config_key)) for module in list_modules()]
    return render_template('devel/info.html', modules=modules)


@blueprint.route('/php', methods=['GET', 'POST'])
@require_permission('execute php code')
def execute():
    form = DevelExecuteForm()
    submitted = None
    if form.validate_on_submit():
        submitted = form.code.data
        current_app.logger.warning(f"Devel code submitted by uid {current_user.user_id}")
    return render_template('devel/execute.html', form=form, submitted=submitted)


@blueprint.route('/switch/<int:user_id>', methods=['POST'])
@require_permission('switch users')
def switch_user(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        abort(404)
    AuthService.end_session(session.pop(SESSION_KEY, None))
    login_user(user)
    session[SESSION_KEY] = AuthService.start_session(user).session_id
    flash(f"Now acting as {user.username}.", 'info')
    return redirect(url_for('user_profile.view_profile', user_id=user.user_id))
