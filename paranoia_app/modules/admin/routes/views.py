from flask import flash, redirect, render_template, url_for
from flask_login import current_user

from paranoia_app.core.decorators import require_permission
from paranoia_app.core.module_registry import get_module, list_modules
from paranoia_app.models import User

from .. import admin_bp as blueprint
from ..services import AdminService


@blueprint.route('/', methods=['GET'])
@require_permission('access administration pages')
def admin_dashboard():
    return render_template('admin/index.html', page_title='Administration')


@blueprint.route('/modules', methods=['GET', 'POST'])
@require_permission('administer modules')
def manage_modules():
    """Module list with one switch per module."""
    form = AdminService.build_modules_form()

    if form.validate_on_submit():
        enabled, disabled = AdminService.save_module_states(form, user_id=current_user.user_id)
        for key in enabled:
            flash(f"The {get_module(key).display_name} module has been enabled.", 'success')
        for key in disabled:
            flash(f"The {get_module(key).display_name} module has been disabled.", 'info')
        return redirect(url_for('admin.manage_modules'))

    return render_template(
        'admin/modules.html',
        form=form,
        modules={module.config_key: module for module in list_modules()},
        page_title='Modules',
    )


@blueprint.route('/permissions', methods=['GET', 'POST'])
@require_permission('administer permissions')
def manage_permissions():
    """Role/permission matrix."""
    form = AdminService.build_permissions_form()

    if form.validate_on_submit():
        AdminService.save_permissions(form)
        flash('The changes have been saved.', 'success')
        return redirect(url_for('admin.manage_permissions'))

    return render_template(
        'admin/permissions.html',
        form=form,
        roles=AdminService.list_roles(),
        page_title='Permissions',
    )


@blueprint.route('/users', methods=['GET'])
@require_permission('administer users')
def manage_users():
    users = User.query.order_by(User.user_id).all()
    return render_template('admin/users.html', users=users, page_title='Users')
