"""
Student Registration Service - FastAPI Application Entry Point.

This is the main application module that:
1. Initializes the FastAPI app with CORS middleware
2. Sets up structured JSON logging
3. Implements request ID middleware (X-Request-ID header)
4. Maps registration errors to {success: false, message} responses
5. Registers the API routes and serves the registration form

The application follows a modular architecture:
- routes/: API endpoint handlers
- services/: validation rules, password hashing, registration flow
- storage.py: JSON file / SQL / in-memory record stores
- models/: SQLAlchemy ORM models for the SQL backend
- logging_config.py: Structured logging configuration
"""

import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app import config
from app.dependencies import get_registration_service
from app.errors import RegistrationError
from app.logging_config import (
    setup_logging, get_logger, log_with_context,
    request_id_var, generate_request_id
)
from app.routes import students

# ──────────────────────────────────────────────────────────────
# Initialize structured logging BEFORE anything else
# ──────────────────────────────────────────────────────────────
setup_logging()
logger = get_logger("http")

SERVICE_NAME = "student-registration"
VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create the record file / tables before the first request
    factory = app.dependency_overrides.get(get_registration_service, get_registration_service)
    factory()
    log_with_context(logger, "INFO", "Server running on port {}".format(config.PORT),
                     extra_data={"storage_backend": config.STORAGE_BACKEND})
    yield


# ──────────────────────────────────────────────────────────────
# Create FastAPI application
# ──────────────────────────────────────────────────────────────
app = FastAPI(
    title="Student Registration Service",
    description=(
        "Student self-registration: validates the form, hashes the password "
        "and appends the registrant to the record collection."
    ),
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"]
)


# ──────────────────────────────────────────────────────────────
# Request ID Middleware
#
# Generates a unique UUID per incoming request, stores it in a context
# variable for every log entry, returns it in X-Request-ID and logs
# request start/end with latency.
# ──────────────────────────────────────────────────────────────
@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    req_id = generate_request_id()
    request_id_var.set(req_id)

    start_time = time.time()

    log_with_context(logger, "INFO",
        f"Request started: {request.method} {request.url.path}",
        context={"request_id": req_id},
        extra_data={
            "ip": request.client.host if request.client else "unknown",
            "user_agent": request.headers.get("user-agent", ""),
        })

    response = await call_next(request)

    duration_ms = (time.time() - start_time) * 1000
    response.headers["X-Request-ID"] = req_id

    log_with_context(logger, "INFO",
        f"Request completed: {request.method} {request.url.path} → {response.status_code}",
        context={"request_id": req_id},
        extra_data={
            "duration_ms": round(duration_ms, 2),
            "status_code": response.status_code
        })

    return response


# ──────────────────────────────────────────────────────────────
# Error responses
# ──────────────────────────────────────────────────────────────
@app.exception_handler(RegistrationError)
async def registration_error_handler(request: Request, exc: RegistrationError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    log_with_context(logger, "INFO", "Malformed request body",
                     extra_data={"path": request.url.path, "errors": len(exc.errors())})
    return JSONResponse(status_code=400, content={"success": False, "message": "Invalid request body"})


# ──────────────────────────────────────────────────────────────
# Routes
# ──────────────────────────────────────────────────────────────
app.include_router(students.router, tags=["Students"])


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint for container probes and monitoring."""
    return {"status": "healthy", "service": SERVICE_NAME, "version": VERSION}


@app.get("/api", tags=["Root"])
def api_info():
    """Service information and endpoint list."""
    return {
        "service": "Student Registration Service",
        "version": VERSION,
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "register": "POST /register-student",
            "students": "GET /students",
            "validation_rules": "GET /api/validation-rules"
        }
    }


# Registration form (index.html, script.js). Mounted last so it never
# shadows the API routes.
if config.PUBLIC_DIR.is_dir():
    app.mount("/", StaticFiles(directory=config.PUBLIC_DIR, html=True), name="public")


def run():
    """Serve the application with uvicorn on the configured port."""
    uvicorn.run(app, host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
