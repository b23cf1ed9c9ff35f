# File: paranoia_app/modules/admin/__init__.py
# Blueprint for the administration pages: module switches and the role/permission matrix.

from flask import Blueprint

admin_bp = Blueprint('admin', __name__)

from . import routes  # noqa: E402,F401
