from flask import abort, flash, redirect, render_template, session, url_for
from flask_login import current_user, login_required

from paranoia_app.core.extensions import db
from paranoia_app.models import User
from paranoia_app.modules.auth.services.auth_service import SESSION_KEY

from .. import user_profile_bp as blueprint
from ..services import UserProfileService


@blueprint.before_request
@login_required
def profile_required():
    pass


@blueprint.route('/<int:user_id>')
def view_profile(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        abort(404)
    return render_template('user_profile/profile.html', user=user)


@blueprint.route('/<int:user_id>/edit', methods=['GET', 'POST'])
def edit_profile(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        abort(404)
    if not UserProfileService.can_edit(current_user, user):
        abort(403)

    form = UserProfileService.build_form(current_user._get_current_object(), user)

    if form.validate_on_submit() and UserProfileService.check_current_password(form):
        changes = UserProfileService.save_profile(form, session_id=session.get(SESSION_KEY))
        flash('The changes have been saved.' if changes else 'Nothing was changed.', 'success')
        return redirect(url_for('user_profile.view_profile', user_id=user.user_id))

    return render_template('user_profile/edit_profile.html', form=form, user=user)
