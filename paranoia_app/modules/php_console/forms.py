from wtforms import SubmitField, TextAreaField
from wtforms.validators import DataRequired

from paranoia_app.core.forms import HookedForm


class PhpEvalForm(HookedForm):
    form_id = 'php_eval_form'

    code = TextAreaField('PHP code', validators=[DataRequired()])
    submit = SubmitField('Execute')
