"""
Shared validation rules for student registration.

One rule set serves three consumers:
1. The registration service (authoritative, server subset of the rules)
2. The Python ``RegistrationClient`` (full form rules, advisory)
3. The browser form, which downloads ``rules_manifest()`` from
   GET /api/validation-rules

Every check is a pure function over a dict of form values keyed by the
camelCase form field names. Failures are returned as ``FieldError`` lists
instead of being raised, so callers decide whether to stop at the first one
(server) or surface them all at once (form).
"""

import re
from dataclasses import dataclass, asdict
from typing import List, Optional

# ──────────────────────────────────────────────────────────────
# Rule constants
# ──────────────────────────────────────────────────────────────
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
PHONE_DIGITS = 10
PIN_CODE_DIGITS = 6
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_BYTES = 72     # bcrypt ignores everything past 72 bytes

_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_NON_DIGIT_RE = re.compile(r"[^0-9]")

FORM_FIELDS = [
    "fullName", "dob", "gender", "bloodGroup", "nationality",
    "email", "phone", "altPhone", "address", "city", "state", "pinCode",
    "course", "branch", "year", "college", "rollNumber",
    "password", "confirmPassword",
]
FORM_REQUIRED_FIELDS = [
    "fullName", "email", "phone", "course", "branch", "year",
    "college", "rollNumber", "password", "confirmPassword",
]
SERVER_REQUIRED_FIELDS = ["fullName", "email", "password"]
DIGIT_FIELDS = {"phone": PHONE_DIGITS, "altPhone": PHONE_DIGITS, "pinCode": PIN_CODE_DIGITS}

# Server messages. The browser matches "email", "Phone" and "PIN" in these
# to pick the field to highlight.
MSG_REQUIRED = "Full name, email, and password are required"
MSG_INVALID_EMAIL = "Invalid email format"
MSG_PHONE = "Phone number must be 10 digits"
MSG_PIN_CODE = "PIN code must be 6 digits"
MSG_PASSWORD_TOO_LONG = "Password must be at most 72 bytes"
MSG_DUPLICATE_EMAIL = "Email already registered"

# Form messages
MSG_FIELD_REQUIRED = "This field is required"
MSG_FORM_EMAIL = "Please enter a valid email address"
MSG_PASSWORD_TOO_SHORT = "Password must be at least 6 characters"
MSG_PASSWORD_MISMATCH = "Passwords do not match"

# Substrings of failed server messages mapped back to form fields, in order
SERVER_MESSAGE_HINTS = [("email", "email"), ("Phone", "phone"), ("PIN", "pinCode")]


@dataclass(frozen=True)
class FieldError:
    """A validation failure attached to one named form input."""
    field: str
    message: str

    def to_dict(self) -> dict:
        return asdict(self)


def _present(value) -> bool:
    return value is not None and str(value).strip() != ""


def _provided(value) -> bool:
    """Submitted at all. Whitespace-only values count and must pass format checks."""
    return value is not None and str(value) != ""


def digits_only(value: str) -> str:
    """Strip every non-digit character ("98765-43210" → "9876543210")."""
    return _NON_DIGIT_RE.sub("", value or "")


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_RE.fullmatch(value or ""))


def is_valid_phone(value: str) -> bool:
    """Exactly 10 digits once separators are removed."""
    return len(digits_only(value)) == PHONE_DIGITS


def is_valid_pin_code(value: str) -> bool:
    """Exactly 6 digits, no separators allowed."""
    value = value or ""
    return len(value) == PIN_CODE_DIGITS and not _NON_DIGIT_RE.search(value)


def password_too_long(value: str) -> bool:
    return len((value or "").encode("utf-8")) > PASSWORD_MAX_BYTES


# ──────────────────────────────────────────────────────────────
# Server rules
# ──────────────────────────────────────────────────────────────

def validate_registration(data: dict) -> List[FieldError]:
    """
    Apply the server-side rules to a registration payload.

    Checks run in a fixed order (required fields, email, phone, PIN code,
    password length cap) and the returned list keeps that order, so the
    first entry is the error a client is told about.
    """
    missing = [name for name in SERVER_REQUIRED_FIELDS if not _present(data.get(name))]
    if missing:
        return [FieldError(missing[0], MSG_REQUIRED)]

    errors = []
    if not is_valid_email(data["email"]):
        errors.append(FieldError("email", MSG_INVALID_EMAIL))

    phone = data.get("phone")
    if _provided(phone) and not is_valid_phone(phone):
        errors.append(FieldError("phone", MSG_PHONE))

    pin_code = data.get("pinCode")
    if _provided(pin_code) and not is_valid_pin_code(pin_code):
        errors.append(FieldError("pinCode", MSG_PIN_CODE))

    if password_too_long(data["password"]):
        errors.append(FieldError("password", MSG_PASSWORD_TOO_LONG))

    return errors


# ──────────────────────────────────────────────────────────────
# Form rules
# ──────────────────────────────────────────────────────────────

def validate_field(name: str, value, data: Optional[dict] = None) -> Optional[FieldError]:
    """Check one form input, as done when it loses focus.

    ``data`` holds the rest of the form; it is only consulted for the
    password confirmation.
    """
    data = data or {}
    if not _present(value):
        if name in FORM_REQUIRED_FIELDS:
            return FieldError(name, MSG_FIELD_REQUIRED)
        if not _provided(value):
            return None

    value = str(value)
    if name == "email" and not is_valid_email(value):
        return FieldError(name, MSG_FORM_EMAIL)
    if name in ("phone", "altPhone") and not is_valid_phone(value):
        return FieldError(name, MSG_PHONE)
    if name == "pinCode" and not is_valid_pin_code(value):
        return FieldError(name, MSG_PIN_CODE)
    if name == "password":
        if len(value) < PASSWORD_MIN_LENGTH:
            return FieldError(name, MSG_PASSWORD_TOO_SHORT)
        if password_too_long(value):
            return FieldError(name, MSG_PASSWORD_TOO_LONG)
    password = data.get("password")
    if name == "confirmPassword" and _present(password) and value != password:
        return FieldError(name, MSG_PASSWORD_MISMATCH)
    return None


def validate_form(data: dict) -> List[FieldError]:
    """Check every form input and report all failures, in form order."""
    errors = []
    for name in FORM_FIELDS:
        error = validate_field(name, data.get(name), data)
        if error:
            errors.append(error)
    return errors


# ──────────────────────────────────────────────────────────────
# Input shaping and server error mapping
# ──────────────────────────────────────────────────────────────

def shape_digits(value: str, limit: int) -> str:
    """Keep only digits and truncate to ``limit`` characters."""
    return digits_only(value)[:limit]


def shape_form(data: dict) -> dict:
    """Return a copy of the form with phone and PIN inputs shaped."""
    shaped = dict(data)
    for name, limit in DIGIT_FIELDS.items():
        if shaped.get(name) is not None:
            shaped[name] = shape_digits(str(shaped[name]), limit)
    return shaped


def target_field(result: dict) -> Optional[str]:
    """
    Pick the form field a failed server response refers to.

    An explicit ``field`` key wins; otherwise the message is matched against
    the known substrings. Returns None for errors that belong to no field.
    """
    field = result.get("field")
    if field in FORM_FIELDS:
        return field
    message = result.get("message") or ""
    for hint, name in SERVER_MESSAGE_HINTS:
        if hint in message:
            return name
    return None


def rules_manifest() -> dict:
    """JSON-serialisable description of the rules for the browser form."""
    return {
        "fields": FORM_FIELDS,
        "requiredFields": FORM_REQUIRED_FIELDS,
        "serverRequiredFields": SERVER_REQUIRED_FIELDS,
        "patterns": {
            "email": EMAIL_PATTERN,
            "phone": "^[0-9]{%d}$" % PHONE_DIGITS,
            "pinCode": "^[0-9]{%d}$" % PIN_CODE_DIGITS,
        },
        "digitFields": DIGIT_FIELDS,
        "passwordMinLength": PASSWORD_MIN_LENGTH,
        "passwordMaxBytes": PASSWORD_MAX_BYTES,
        "messages": {
            "required": MSG_FIELD_REQUIRED,
            "email": MSG_FORM_EMAIL,
            "phone": MSG_PHONE,
            "pinCode": MSG_PIN_CODE,
            "passwordTooShort": MSG_PASSWORD_TOO_SHORT,
            "passwordTooLong": MSG_PASSWORD_TOO_LONG,
            "passwordMismatch": MSG_PASSWORD_MISMATCH,
        },
        "serverMessageHints": [list(hint) for hint in SERVER_MESSAGE_HINTS],
    }
