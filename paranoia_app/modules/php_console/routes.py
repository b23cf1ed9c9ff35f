from flask import current_app, render_template
from flask_login import current_user

from paranoia_app.core.decorators import require_permission

from . import php_console_bp as blueprint
from .forms import PhpEvalForm


@blueprint.route('/', methods=['GET', 'POST'])
@require_permission('use PHP for settings')
def console():
    form = PhpEvalForm()
    submitted = None
    if form.validate_on_submit():
        submitted = form.code.data
        current_app.logger.warning(f"PHP console snippet submitted by uid {current_user.user_id}")
    return render_template('php_console/console.html', form=form, submitted=submitted)
