from wtforms import SubmitField, TextAreaField
from wtforms.validators import DataRequired

from paranoia_app.core.forms import HookedForm


class DevelExecuteForm(HookedForm):
    form_id = 'devel_execute_form'

    code = TextAreaField('PHP code to execute', validators=[DataRequired()])
    submit = SubmitField('Execute')
