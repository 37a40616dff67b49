"""Pytest configuration and fixtures for the registration service tests."""

import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_registration_service
from app.main import app
from app.schemas import StudentRecord
from app.services.passwords import PasswordHasher
from app.services.registration import RegistrationService, generate_id, utc_timestamp
from app.storage import InMemoryStore


@pytest.fixture
def hasher():
    """bcrypt at the minimum cost so tests stay fast."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def service(store, hasher):
    return RegistrationService(store, hasher)


@pytest.fixture
def client(service):
    """TestClient wired to the in-memory service."""
    app.dependency_overrides[get_registration_service] = lambda: service
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def valid_form():
    """A complete registration form as the browser submits it."""
    return {
        "fullName": "A B",
        "dob": "2004-05-17",
        "gender": "Female",
        "bloodGroup": "O+",
        "nationality": "Indian",
        "email": "a@b.com",
        "phone": "1234567890",
        "altPhone": "9876543210",
        "address": "12 MG Road",
        "city": "Pune",
        "state": "Maharashtra",
        "pinCode": "411001",
        "course": "B.Tech",
        "branch": "CSE",
        "year": "2",
        "college": "COEP",
        "rollNumber": "CS22-041",
        "password": "secret1",
        "confirmPassword": "secret1",
    }


@pytest.fixture
def record_factory():
    """Build StudentRecord objects without hashing a real password."""
    def make(email="a@b.com", full_name="A B", **fields):
        return StudentRecord(
            id=generate_id(),
            full_name=full_name,
            email=email,
            password_hash="$2b$04$notarealhashnotarealhashnotarealhashnotarealhash12",
            created_at=utc_timestamp(),
            **fields,
        )
    return make
