"""
User Profile Service - who may edit an account and how edits are saved.
"""
from typing import List, Optional

from flask import current_app

from paranoia_app.core.extensions import db
from paranoia_app.core.signals import user_updated
from paranoia_app.models import User

from ..forms import ProfileEditForm


class UserProfileService:

    @staticmethod
    def can_edit(acting_user, target_user: User) -> bool:
        if not acting_user.is_authenticated:
            return False
        return acting_user.user_id == target_user.user_id or acting_user.has_permission('administer users')

    @staticmethod
    def can_change_username(acting_user, target_user: User) -> bool:
        if acting_user.has_permission('administer users'):
            return True
        return acting_user.user_id == target_user.user_id and acting_user.has_permission('change own username')

    @classmethod
    def build_form(cls, acting_user, target_user: User, **kwargs) -> ProfileEditForm:
        form = ProfileEditForm(target_user=target_user, acting_user=acting_user, **kwargs)
        if not cls.can_change_username(acting_user, target_user):
            form.deny_field('username')
        return form

    @staticmethod
    def check_current_password(form: ProfileEditForm) -> bool:
        """Own e-mail or password changes need the current password."""
        target, acting = form.target_user, form.acting_user
        if acting.user_id != target.user_id:
            return True

        data = form.editable_data()
        changing_email = 'email' in data and data['email'] != target.email
        changing_password = bool(data.get('password'))
        if not (changing_email or changing_password):
            return True

        if not form.is_field_editable('current_password') or not target.check_password(data.get('current_password') or ''):
            form.current_password.errors.append('Your current password is missing or incorrect.')
            return False
        return True

    @staticmethod
    def save_profile(form: ProfileEditForm, session_id: Optional[str] = None) -> List[str]:
        """Apply editable fields, commit and announce the change.

        Returns the names of the changed attributes.
        """
        user, acting = form.target_user, form.acting_user
        data = form.editable_data()
        changes = []

        for attr in ('username', 'email'):
            if attr in data and data[attr] != getattr(user, attr):
                setattr(user, attr, data[attr])
                changes.append(attr)

        if data.get('password'):
            user.set_password(data['password'])
            changes.append('password')

        if not changes:
            return changes

        db.session.commit()
        current_app.logger.info(f"Account uid {user.user_id} updated by uid {acting.user_id}: {', '.join(changes)}")

        user_updated.send(
            current_app._get_current_object(),
            user=user,
            changes=changes,
            acting_user=acting,
            session_id=session_id,
        )
        return changes
