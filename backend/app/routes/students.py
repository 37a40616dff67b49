"""
Student registration API routes.

- POST /register-student: validate and store one registration
- GET  /students: list registrants without password hashes (admin token)
- GET  /api/validation-rules: the shared rule set for the browser form
"""

import time

from fastapi import APIRouter, Depends

from app.dependencies import get_registration_service, require_admin_token
from app.errors import RegistrationError, StorageError, UnexpectedError
from app.logging_config import get_logger, log_with_context
from app.schemas import RegistrationRequest
from app.services.registration import RegistrationService
from app.services.validation import rules_manifest

router = APIRouter()
logger = get_logger("http")


@router.post("/register-student", status_code=201)
def register_student(request: RegistrationRequest,
                     service: RegistrationService = Depends(get_registration_service)):
    """
    Register a student.

    Returns 201 with the new student's id, name and email. Validation and
    duplicate failures are 400; storage or other failures are a generic 500
    whose detail is only logged.
    """
    start_time = time.time()
    try:
        record = service.register(request)
    except StorageError as e:
        log_with_context(logger, "ERROR", "Registration storage failure: {}".format(e.detail))
        raise
    except RegistrationError:
        raise
    except Exception as e:
        log_with_context(logger, "ERROR", "Registration error: {}".format(type(e).__name__),
                         exc_info=e)
        raise UnexpectedError() from e

    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "INFO", "Registration completed",
                     context={"student_id": record.id},
                     extra_data={"duration_ms": round(duration_ms, 2)})

    return {
        "success": True,
        "message": "Student registered successfully!",
        "student": record.summary(),
    }


@router.get("/students", dependencies=[Depends(require_admin_token)])
def list_students(service: RegistrationService = Depends(get_registration_service)):
    """List every registrant. Password hashes are never included."""
    try:
        students = service.list_students()
    except StorageError as e:
        log_with_context(logger, "ERROR", "Listing storage failure: {}".format(e.detail))
        raise
    except Exception as e:
        log_with_context(logger, "ERROR", "Listing error: {}".format(type(e).__name__),
                         exc_info=e)
        raise UnexpectedError() from e

    return {"success": True, "students": students}


@router.get("/api/validation-rules")
def validation_rules():
    """Patterns, limits and messages used to validate the registration form."""
    return rules_manifest()
