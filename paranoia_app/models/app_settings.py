"""Unified application settings model for all configuration."""

from __future__ import annotations

from typing import Any

from sqlalchemy.sql import func

from ..core.extensions import db


class AppSettings(db.Model):
    """Key-value store for all application settings."""

    __tablename__ = 'app_settings'

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.JSON, nullable=False)

    # Categorization
    category = db.Column(db.String(50), default='system')  # 'system', 'module', 'paranoia', 'legacy'

    # Metadata
    data_type = db.Column(db.String(50), default='string')  # 'string', 'int', 'bool', 'json'
    description = db.Column(db.Text)

    # Audit
    updated_at = db.Column(db.DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    updated_by = db.Column(db.Integer, db.ForeignKey('users.user_id'), nullable=True)

    updater = db.relationship('User', foreign_keys=[updated_by], lazy=True)

    # --- Helper Methods ---

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """Get a setting value by key.

        Args:
            key: The setting key
            default: Fallback when the key is not stored

        Returns:
            The setting value or default
        """
        setting = db.session.get(cls, key)
        if setting is None or setting.value is None:
            return default
        return setting.value

    @classmethod
    def has(cls, key: str) -> bool:
        return db.session.get(cls, key) is not None

    @classmethod
    def set(cls, key: str, value: Any, category: str = None,
            data_type: str = None, description: str = None,
            user_id: int = None) -> 'AppSettings':
        """Set or update a setting. The caller commits.

        Args:
            key: The setting key
            value: The value to store (will be JSON serialized)
            category: Category for grouping settings
            data_type: Type hint for parsing
            description: Optional description
            user_id: ID of user making the change

        Returns:
            The AppSettings instance
        """
        setting = db.session.get(cls, key)
        if setting is None:
            setting = cls(
                key=key,
                value=value,
                category=category or 'system',
                data_type=data_type or 'string',
                description=description,
                updated_by=user_id
            )
            db.session.add(setting)
        else:
            setting.value = value
            if category is not None:
                setting.category = category
            if data_type is not None:
                setting.data_type = data_type
            if description is not None:
                setting.description = description
            if user_id is not None:
                setting.updated_by = user_id
        return setting

    @classmethod
    def delete(cls, key: str) -> bool:
        setting = db.session.get(cls, key)
        if setting is None:
            return False
        db.session.delete(setting)
        return True

    def __repr__(self) -> str:
        return f'<AppSettings {self.key}={self.value!r}>'
