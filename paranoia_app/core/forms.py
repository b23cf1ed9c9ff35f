# File: paranoia_app/core/forms.py
# Base form class whose instances can be altered by other modules.

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Set

from flask_wtf import FlaskForm

from .signals import form_built

FormValidator = Callable[["HookedForm"], bool]

# Fields that never carry user data.
NON_DATA_FIELDS = {"csrf_token", "submit"}


class HookedForm(FlaskForm):
    """FlaskForm that announces itself through the ``form_built`` signal.

    Listeners receive the form instance and may remove fields, lock fields,
    deny access to the whole form or attach extra form-level validators.
    """

    form_id: str = ""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.access_granted = True
        self.access_denied_reason: Optional[str] = None
        self._form_validators: List[FormValidator] = []
        self._denied_fields: Set[str] = set()
        form_built.send(self, form_id=self.form_id)

    # --- Alteration API ---

    def deny_access(self, reason: str = "Access to this form has been disabled.") -> None:
        self.access_granted = False
        self.access_denied_reason = reason

    def add_form_validator(self, validator: FormValidator) -> None:
        """Attach a form-level validation step. It returns False to reject."""
        self._form_validators.append(validator)

    def remove_field(self, name: str) -> bool:
        if name not in self._fields:
            return False
        del self[name]
        return True

    def deny_field(self, name: str) -> None:
        """Make a field read-only: rendered disabled and ignored on save."""
        field = self._fields.get(name)
        if field is None:
            return
        field.render_kw = dict(field.render_kw or {}, disabled=True)
        # Disabled inputs are not posted; keep the stored value for validation.
        field.data = field.object_data
        field.raw_data = []
        self._denied_fields.add(name)

    def is_field_editable(self, name: str) -> bool:
        return name in self._fields and name not in self._denied_fields

    def editable_data(self) -> Dict[str, Any]:
        return {
            name: field.data
            for name, field in self._fields.items()
            if name not in NON_DATA_FIELDS and name not in self._denied_fields
        }

    # --- Validation ---

    def validate(self, extra_validators=None) -> bool:
        if not self.access_granted:
            self.form_errors.append(self.access_denied_reason)
            return False

        success = super().validate(extra_validators=extra_validators)
        for validator in self._form_validators:
            if not validator(self):
                success = False
        return success
