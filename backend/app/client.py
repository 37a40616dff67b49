"""
Python client for the registration form.

Runs the same submit flow as the browser form:
shape phone/PIN inputs → validate every field → POST /register-student →
map the response to success, a field-targeted error, a generic failure or
a network error. Invalid forms never reach the network.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import httpx

from app.services.validation import FieldError, shape_form, target_field, validate_form

GENERIC_FAILURE = "Registration failed. Please try again."
NETWORK_FAILURE = "Network error. Please check your connection and try again."


@dataclass
class SubmissionOutcome:
    """Result of one form submission attempt."""
    success: bool
    field_errors: List[FieldError] = field(default_factory=list)
    message: Optional[str] = None
    student: Optional[dict] = None
    status_code: Optional[int] = None

    @property
    def submitted(self) -> bool:
        """True when the request reached the server."""
        return self.status_code is not None


class RegistrationClient:
    """Submits registration forms to a running service."""

    def __init__(self, base_url: str = "http://localhost:3000", timeout: float = 30.0,
                 http_client: Optional[httpx.Client] = None):
        self._client = http_client or httpx.Client(base_url=base_url, timeout=timeout)
        self._owns_client = http_client is None

    def close(self):
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def submit(self, form: dict) -> SubmissionOutcome:
        form = shape_form(form)

        errors = validate_form(form)
        if errors:
            return SubmissionOutcome(success=False, field_errors=errors)

        try:
            response = self._client.post("/register-student", json=form)
        except httpx.TransportError:
            return SubmissionOutcome(success=False, message=NETWORK_FAILURE)

        try:
            result = response.json()
        except ValueError:
            result = {}
        if not isinstance(result, dict):
            result = {}

        if result.get("success"):
            return SubmissionOutcome(success=True, message=result.get("message"),
                                     student=result.get("student"),
                                     status_code=response.status_code)

        message = result.get("message") or GENERIC_FAILURE
        target = target_field(result)
        if target:
            return SubmissionOutcome(success=False, field_errors=[FieldError(target, message)],
                                     message=message, status_code=response.status_code)
        return SubmissionOutcome(success=False, message=message, status_code=response.status_code)
