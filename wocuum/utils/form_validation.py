"""
Form checks mirrored from the web client.

These rules give early feedback while a user fills in the login, register
and forgot-password forms. They are stricter than the server schemas in
``wocuum.schemas.user`` (which only require a valid email and a password of
six characters) and are never used to accept or reject an API request.
Error values are translation keys, passed through ``translate`` so callers
can localize them.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

LOGIN = "login"
REGISTER = "register"
FORGOT = "forgot"

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)
FULL_NAME_PATTERN = re.compile(r"^[a-zA-ZÀ-ÿ\s'-]+$")

EMAIL_MAX_LENGTH = 254
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128
FULL_NAME_MIN_LENGTH = 4
FULL_NAME_MAX_LENGTH = 100

INPUT_PATTERNS = {
    "alphanumeric": re.compile(r"^[a-zA-Z0-9]+$"),
    "alphabetic": re.compile(r"^[a-zA-Z]+$"),
    "numeric": re.compile(r"^\d+$"),
}


def _identity(key: str) -> str:
    return key


@dataclass
class FormValidation:
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _email_error(email: Optional[str]) -> Optional[str]:
    if not email or not email.strip():
        return "auth.errors.emailRequired"
    if not EMAIL_PATTERN.fullmatch(email):
        return "auth.errors.emailInvalid"
    if len(email) > EMAIL_MAX_LENGTH:
        return "auth.errors.emailTooLong"
    return None


def _password_error(password: Optional[str]) -> Optional[str]:
    # first failing rule wins
    if not password:
        return "auth.errors.passwordRequired"
    if len(password) < PASSWORD_MIN_LENGTH:
        return "auth.errors.passwordMinLength"
    if len(password) > PASSWORD_MAX_LENGTH:
        return "auth.errors.passwordTooLong"
    if not re.search(r"[a-z]", password):
        return "auth.errors.passwordLowercase"
    if not re.search(r"[A-Z]", password):
        return "auth.errors.passwordUppercase"
    if not re.search(r"\d", password):
        return "auth.errors.passwordNumber"
    if re.search(r"\s", password):
        return "auth.errors.passwordSpaces"
    return None


def _full_name_error(full_name: Optional[str]) -> Optional[str]:
    if not full_name or not full_name.strip():
        return "auth.errors.fullNameRequired"
    if len(full_name.strip()) < FULL_NAME_MIN_LENGTH:
        return "auth.errors.fullNameShort"
    if len(full_name) > FULL_NAME_MAX_LENGTH:
        return "auth.errors.fullNameTooLong"
    if not FULL_NAME_PATTERN.fullmatch(full_name.strip()):
        return "auth.errors.fullNameInvalid"
    return None


def validate_auth_form(
    form_data: dict,
    view_type: str,
    translate: Callable[[str], str] = _identity,
) -> FormValidation:
    """Validate a login, register or forgot-password form."""
    keys = {"email": _email_error(form_data.get("email"))}

    if view_type != FORGOT:
        keys["password"] = _password_error(form_data.get("password"))

    if view_type == REGISTER:
        keys["fullName"] = _full_name_error(form_data.get("fullName"))
        confirm = form_data.get("confirmPassword")
        if not confirm:
            keys["confirmPassword"] = "auth.errors.passwordRequired"
        elif confirm != form_data.get("password"):
            keys["confirmPassword"] = "auth.errors.passwordMismatch"

    return FormValidation(
        errors={name: translate(key) for name, key in keys.items() if key is not None}
    )


def validate_field(
    field_name: str,
    value,
    form_data: dict,
    view_type: str,
    translate: Callable[[str], str] = _identity,
) -> Optional[str]:
    """Error for one field as the user types, with the rest of the form for cross-field rules."""
    result = validate_auth_form({**form_data, field_name: value}, view_type, translate)
    return result.errors.get(field_name)


def escape_html(value) -> str:
    """
    HTML-escape a display string and trim it. Non-strings become an empty string.

    ``&`` is escaped first as well, unlike the web client's helper, so an
    already escaped value like ``&lt;`` stays distinguishable from ``<``.
    """
    if not isinstance(value, str):
        return ""
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#x27;")
        .replace("/", "&#x2F;")
        .strip()
    )


def validate_input(kind: str, value: str) -> FormValidation:
    pattern = INPUT_PATTERNS.get(kind)
    if pattern is None:
        return FormValidation(errors={"value": "Unknown validation type"})
    if not pattern.fullmatch(value or ""):
        return FormValidation(errors={"value": f"Invalid {kind} format"})
    return FormValidation()
