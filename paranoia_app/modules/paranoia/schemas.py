from marshmallow import EXCLUDE, Schema, fields, validate

from .config import ParanoiaDefaultConfig


class ParanoiaSettingsSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    access_threshold = fields.Integer(
        load_default=ParanoiaDefaultConfig.ACCESS_THRESHOLD,
        validate=validate.Range(min=0),
    )
    email_notification = fields.Boolean(load_default=ParanoiaDefaultConfig.EMAIL_NOTIFICATION)


class PolicySnapshotSchema(Schema):
    hidden_modules = fields.List(fields.String())
    hidden_permissions = fields.List(fields.String())
    hidden_paths = fields.List(fields.String())
    disabled_modules = fields.List(fields.String())
    risky_forms = fields.List(fields.String())
