# File: paranoia_app/modules/user_profile/forms.py

from wtforms import PasswordField, StringField, SubmitField
from wtforms.validators import DataRequired, Length, Optional, ValidationError

from paranoia_app.core.forms import HookedForm
from paranoia_app.models import User


class ProfileEditForm(HookedForm):
    """
    Account edit form.
    ``target_user`` is the account being edited, ``acting_user`` the one editing it.
    Both are set before the ``form_built`` signal fires so listeners can use them.
    """

    form_id = 'user_profile_form'

    username = StringField('Username', validators=[DataRequired(), Length(max=80)])
    email = StringField('E-mail address', validators=[DataRequired(), Length(max=120)])
    current_password = PasswordField('Current password', validators=[Optional()])
    password = PasswordField('New password', validators=[Optional(), Length(min=6)])
    submit = SubmitField('Save')

    def __init__(self, *args, target_user=None, acting_user=None, **kwargs):
        self.target_user = target_user
        self.acting_user = acting_user
        kwargs.setdefault('obj', target_user)
        super().__init__(*args, **kwargs)

    def validate_username(self, field):
        existing = User.query.filter(User.username == field.data).first()
        if existing is not None and existing.user_id != self.target_user.user_id:
            raise ValidationError('This username is already taken.')

    def validate_email(self, field):
        existing = User.query.filter(User.email == field.data).first()
        if existing is not None and existing.user_id != self.target_user.user_id:
            raise ValidationError('This e-mail address is already registered.')
