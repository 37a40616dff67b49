"""
FastAPI dependencies shared by the route modules.

The registration service is built lazily from configuration. Tests replace
it through ``app.dependency_overrides[get_registration_service]``.
"""

import secrets
from typing import Optional

from fastapi import Header

from app import config
from app.errors import AccessDeniedError
from app.services.registration import RegistrationService
from app.storage import build_store

_service: Optional[RegistrationService] = None


def get_registration_service() -> RegistrationService:
    """Return the process-wide service, creating its store on first use."""
    global _service
    if _service is None:
        store = build_store()
        store.initialize()
        _service = RegistrationService(store)
    return _service


def require_admin_token(x_admin_token: Optional[str] = Header(None)):
    """
    Guard for endpoints that expose registrant PII.

    Listing is disabled (403) until ADMIN_TOKEN is configured; afterwards the
    X-Admin-Token header must match it (401 otherwise).
    """
    if not config.ADMIN_TOKEN:
        raise AccessDeniedError("Student listing is disabled", status_code=403)
    if not x_admin_token or not secrets.compare_digest(x_admin_token, config.ADMIN_TOKEN):
        raise AccessDeniedError("Invalid or missing admin token", status_code=401)
