from wtforms import BooleanField, SelectField, SubmitField

from paranoia_app.core.forms import HookedForm

from .config import ParanoiaDefaultConfig


def _threshold_label(days: int) -> str:
    return 'Disabled' if days == 0 else f'{days} days'


class ParanoiaSettingsForm(HookedForm):
    """Settings for resetting the passwords of unused accounts."""

    form_id = 'paranoia_settings_form'

    access_threshold = SelectField(
        'Reset passwords of accounts unused for more than',
        coerce=int,
        choices=[(days, _threshold_label(days)) for days in ParanoiaDefaultConfig.ACCESS_THRESHOLD_CHOICES],
    )
    email_notification = BooleanField('Notify users by e-mail when their password is reset')
    submit = SubmitField('Save configuration')
