from flask import jsonify

from paranoia_app.core.decorators import require_permission
from paranoia_app.core.error_handlers import success_response

from .. import paranoia_bp as blueprint
from ..logics.registry import collect_all
from ..schemas import ParanoiaSettingsSchema, PolicySnapshotSchema
from ..services import get_settings


@blueprint.route('/api/policy', methods=['GET'])
@require_permission('administer paranoia')
def get_policy():
    """API: merged policy declarations of every collaborator."""
    snapshot = {category: sorted(values) for category, values in collect_all().items()}
    return jsonify(success_response(PolicySnapshotSchema().dump(snapshot)))


@blueprint.route('/api/settings', methods=['GET'])
@require_permission('administer paranoia')
def get_paranoia_settings():
    return jsonify(success_response(ParanoiaSettingsSchema().dump(get_settings())))
