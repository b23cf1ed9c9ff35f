from flask import current_app, flash, redirect, render_template, url_for
from flask_login import current_user
from marshmallow import ValidationError

from paranoia_app.core.decorators import require_permission

from .. import paranoia_bp as blueprint
from ..forms import ParanoiaSettingsForm
from ..logics.registry import collect_all
from ..services import get_settings, save_settings


@blueprint.route('/', methods=['GET', 'POST'])
@require_permission('administer paranoia')
def settings():
    """Stale-account settings plus a read-only view of the merged policy."""
    form = ParanoiaSettingsForm(data=get_settings())

    if form.validate_on_submit():
        try:
            save_settings(form.editable_data(), user_id=current_user.user_id)
        except ValidationError as e:
            current_app.logger.warning(f"Rejected paranoia settings: {e.messages}")
            flash('The configuration could not be saved.', 'danger')
        else:
            flash('The configuration options have been saved.', 'success')
            return redirect(url_for('paranoia.settings'))

    return render_template(
        'paranoia/settings.html',
        form=form,
        policy={category: sorted(values) for category, values in collect_all().items()},
        page_title='Paranoia',
    )
