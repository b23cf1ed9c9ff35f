from urllib.parse import urlparse

from flask import current_app, flash, redirect, render_template, request, session, url_for
from flask_login import current_user, login_user, logout_user

from paranoia_app.core.extensions import db

from .. import auth_bp as blueprint
from ..forms import LoginForm, RegistrationForm
from ..services import AuthService
from ..services.auth_service import SESSION_KEY


def register_session_tracking(app):
    @app.before_request
    def validate_auth_session():
        """Log out browsers whose server-side session row no longer exists."""
        if not current_user.is_authenticated:
            return
        if not AuthService.touch_session(current_user, session.get(SESSION_KEY)):
            current_app.logger.info(f"Session of uid {current_user.user_id} is no longer valid, logging out.")
            logout_user()
            session.pop(SESSION_KEY, None)


@blueprint.route('/login', methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(url_for('user_profile.view_profile', user_id=current_user.user_id))

    form = LoginForm()
    if form.validate_on_submit():
        user = AuthService.authenticate_user(form.username.data, form.password.data)
        if user is None:
            flash('Unrecognized username or password.', 'danger')
            return redirect(url_for('auth.login'))

        login_user(user, remember=form.remember_me.data)
        auth_session = AuthService.start_session(user, ip_address=request.remote_addr)
        session[SESSION_KEY] = auth_session.session_id
        flash('You are now logged in.', 'success')

        next_page = request.args.get('next')
        if not next_page or urlparse(next_page).netloc != '':
            next_page = url_for('user_profile.view_profile', user_id=user.user_id)
        return redirect(next_page)

    return render_template('auth/login.html', form=form)


@blueprint.route('/logout', methods=['GET', 'POST'])
def logout():
    AuthService.end_session(session.pop(SESSION_KEY, None))
    logout_user()
    return redirect(url_for('auth.login'))


@blueprint.route('/register', methods=['GET', 'POST'])
def register():
    if current_user.is_authenticated:
        return redirect(url_for('user_profile.view_profile', user_id=current_user.user_id))

    form = RegistrationForm()
    if form.validate_on_submit():
        try:
            AuthService.register_user(form.username.data, form.email.data, form.password.data)
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Registration failed: {e}")
            flash('The account could not be created.', 'danger')
        else:
            flash('Your account has been created. You can log in now.', 'success')
            return redirect(url_for('auth.login'))

    return render_template('auth/register.html', form=form)
