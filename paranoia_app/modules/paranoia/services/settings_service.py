"""
Settings Service - the structured paranoia settings record.

Settings live in ``AppSettings`` under one key as
``{"access_threshold": <days>, "email_notification": <bool>}``.
"""
from typing import Any, Dict, Mapping, Optional

from marshmallow import ValidationError

from paranoia_app.core.logging_config import get_logger
from paranoia_app.models import AppSettings, db

from ..config import ParanoiaDefaultConfig
from ..schemas import ParanoiaSettingsSchema

logger = get_logger('paranoia')

_schema = ParanoiaSettingsSchema()


def default_settings() -> Dict[str, Any]:
    return {
        'access_threshold': ParanoiaDefaultConfig.ACCESS_THRESHOLD,
        'email_notification': ParanoiaDefaultConfig.EMAIL_NOTIFICATION,
    }


def get_settings() -> Dict[str, Any]:
    """Return the stored settings, falling back to defaults when invalid."""
    stored = AppSettings.get(ParanoiaDefaultConfig.SETTINGS_KEY) or {}
    try:
        return _schema.load(stored)
    except ValidationError as e:
        logger.warning("Stored paranoia settings are invalid, using defaults: %s", e.messages)
        return default_settings()


def save_settings(data: Mapping[str, Any], user_id: Optional[int] = None) -> Dict[str, Any]:
    """Validate and persist settings.

    Raises marshmallow.ValidationError on invalid input.
    """
    settings = _schema.load({**get_settings(), **dict(data)})
    AppSettings.set(
        ParanoiaDefaultConfig.SETTINGS_KEY,
        settings,
        category='paranoia',
        data_type='json',
        description='Stale-account password reset settings.',
        user_id=user_id,
    )
    db.session.commit()
    logger.info(
        "Paranoia settings saved: threshold=%s days, email_notification=%s",
        settings['access_threshold'], settings['email_notification'],
    )
    return settings


def migrate_legacy_settings() -> bool:
    """Move the flat legacy keys into the structured record, once.

    The legacy keys are removed afterwards. When a structured record already
    exists it wins and the legacy keys are only deleted. Returns True when
    anything was changed.
    """
    legacy_keys = {
        'access_threshold': ParanoiaDefaultConfig.LEGACY_ACCESS_THRESHOLD_KEY,
        'email_notification': ParanoiaDefaultConfig.LEGACY_EMAIL_NOTIFICATION_KEY,
    }
    present = {field: key for field, key in legacy_keys.items() if AppSettings.has(key)}
    if not present:
        return False

    if not AppSettings.has(ParanoiaDefaultConfig.SETTINGS_KEY):
        legacy = {field: AppSettings.get(key) for field, key in present.items()}
        try:
            settings = _schema.load({**default_settings(), **legacy})
        except ValidationError as e:
            logger.warning("Legacy paranoia settings are invalid, using defaults: %s", e.messages)
            settings = default_settings()
        AppSettings.set(
            ParanoiaDefaultConfig.SETTINGS_KEY,
            settings,
            category='paranoia',
            data_type='json',
            description='Stale-account password reset settings.',
        )
        logger.info("Migrated legacy paranoia settings: %s", settings)

    for key in present.values():
        AppSettings.delete(key)
    db.session.commit()
    return True
