"""
Registration Service - the authoritative validation and persistence gate.

Pipeline for one registration:
1. Re-validate the payload with the shared server rules (client checks are
   advisory only)
2. Fast duplicate check by email against the stored collection
3. Hash the password with bcrypt
4. Build the record (identifier, creation timestamp)
5. Insert it if no record holds the email yet

Step 5 is atomic in every store, so a duplicate that slips past step 2 while
another request is hashing is still rejected.
"""

import secrets
import time
from datetime import datetime, timezone
from typing import List

from app.errors import ConflictError, ValidationError
from app.logging_config import get_logger, log_with_context
from app.schemas import RegistrationRequest, StudentRecord
from app.services.passwords import PasswordHasher
from app.services.validation import validate_registration
from app.storage import StudentStore

logger = get_logger("registration")

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_id() -> str:
    """
    Identifier from the current time in milliseconds plus 52 random bits,
    both base36-encoded (e.g. "lz3k9q1r" + "4f0x8c2m1ab").

    Unique with overwhelming probability; not checked against the store.
    """
    return _to_base36(time.time_ns() // 1_000_000) + _to_base36(secrets.randbits(52))


def utc_timestamp() -> str:
    """ISO 8601 UTC timestamp with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


class RegistrationService:
    """Registers students into a StudentStore."""

    def __init__(self, store: StudentStore, hasher: PasswordHasher = None):
        self.store = store
        self.hasher = hasher or PasswordHasher()

    def register(self, request: RegistrationRequest) -> StudentRecord:
        """
        Validate, deduplicate, hash and persist one registration.

        Raises:
            ValidationError: missing or malformed field
            ConflictError: email already registered
            StorageError: the store could not be read or written
        """
        data = request.form_data()

        errors = validate_registration(data)
        if errors:
            first = errors[0]
            log_with_context(logger, "INFO", "Registration rejected: {}".format(first.message),
                             extra_data={"field": first.field})
            raise ValidationError(first.message, field=first.field)

        if self.store.find_by_email(request.email) is not None:
            log_with_context(logger, "INFO", "Registration rejected: duplicate email",
                             context={"email": request.email})
            raise ConflictError()

        record = StudentRecord(
            id=generate_id(),
            full_name=request.full_name,
            dob=request.dob,
            gender=request.gender,
            blood_group=request.blood_group,
            nationality=request.nationality,
            email=request.email,
            phone=request.phone,
            alt_phone=request.alt_phone,
            address=request.address,
            city=request.city,
            state=request.state,
            pin_code=request.pin_code,
            course=request.course,
            branch=request.branch,
            year=request.year,
            college=request.college,
            roll_number=request.roll_number,
            password_hash=self.hasher.hash(request.password),
            created_at=utc_timestamp(),
        )

        if not self.store.insert_if_absent(record):
            log_with_context(logger, "WARNING", "Concurrent registration for the same email lost the insert",
                             context={"email": request.email})
            raise ConflictError()

        log_with_context(logger, "INFO", "Student registered",
                         context={"student_id": record.id, "email": record.email})
        return record

    def list_students(self) -> List[dict]:
        """Every stored record with the password hash removed."""
        return [record.public_dict() for record in self.store.load()]
