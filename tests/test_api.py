"""HTTP-level tests for the registration API."""

import json

import pytest
from fastapi.testclient import TestClient

from app import config
from app.dependencies import get_registration_service
from app.errors import StorageError
from app.main import app
from app.services.registration import RegistrationService
from app.storage import InMemoryStore, JsonFileStore


class TestRegisterStudent:

    def test_successful_registration(self, client, valid_form):
        response = client.post("/register-student", json=valid_form)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Student registered successfully!"
        assert body["student"]["fullName"] == "A B"
        assert body["student"]["email"] == "a@b.com"
        assert body["student"]["id"]
        assert set(body["student"]) == {"id", "fullName", "email"}
        assert "secret1" not in response.text
        assert "$2b$" not in response.text

    def test_same_email_twice(self, client, valid_form):
        assert client.post("/register-student", json=valid_form).status_code == 201

        response = client.post("/register-student", json=valid_form)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "already registered" in body["message"]
        assert body["field"] == "email"

    def test_short_phone(self, client, valid_form):
        valid_form["phone"] = "12345"
        response = client.post("/register-student", json=valid_form)

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Phone number must be 10 digits",
            "field": "phone",
        }

    @pytest.mark.parametrize("missing", ["fullName", "email", "password"])
    def test_missing_required_field(self, client, valid_form, missing):
        del valid_form[missing]
        response = client.post("/register-student", json=valid_form)

        assert response.status_code == 400
        assert "required" in response.json()["message"]

    def test_invalid_email(self, client, valid_form):
        valid_form["email"] = "a@b"
        response = client.post("/register-student", json=valid_form)

        assert response.status_code == 400
        assert "email" in response.json()["message"]

    @pytest.mark.parametrize("field, value, hint", [
        ("phone", "   ", "Phone"),
        ("phone", "\n", "Phone"),
        ("pinCode", " \t ", "PIN"),
    ])
    def test_whitespace_digit_fields_are_rejected(self, client, store, valid_form, field, value, hint):
        valid_form[field] = value
        response = client.post("/register-student", json=valid_form)

        assert response.status_code == 400
        assert hint in response.json()["message"]
        assert store.load() == []

    def test_invalid_pin_code(self, client, valid_form):
        valid_form["pinCode"] = "4110"
        response = client.post("/register-student", json=valid_form)

        assert response.status_code == 400
        assert "PIN" in response.json()["message"]

    def test_numeric_values_are_accepted(self, client, store, valid_form):
        valid_form["year"] = 2
        assert client.post("/register-student", json=valid_form).status_code == 201
        assert store.load()[0].year == "2"

    def test_body_must_be_an_object(self, client):
        response = client.post("/register-student", json=["a@b.com"])

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid request body"}

    def test_non_json_body(self, client):
        response = client.post("/register-student", content="fullName=A",
                               headers={"Content-Type": "text/plain"})
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_request_id_header(self, client, valid_form):
        response = client.post("/register-student", json=valid_form)
        assert response.headers["X-Request-ID"]


class TestFailures:

    def _client_for(self, service):
        app.dependency_overrides[get_registration_service] = lambda: service
        return TestClient(app, raise_server_exceptions=False)

    def teardown_method(self):
        app.dependency_overrides.clear()

    def test_storage_failure_is_generic_500(self, hasher, valid_form):
        class BrokenStore(InMemoryStore):
            def save(self, records):
                raise StorageError("Cannot write /var/data/students.json: disk full")

        client = self._client_for(RegistrationService(BrokenStore(), hasher))
        response = client.post("/register-student", json=valid_form)

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Internal server error"}
        assert "disk full" not in response.text

    def test_hashing_failure_is_generic_500(self, store, valid_form):
        class BrokenHasher:
            def hash(self, password):
                raise RuntimeError("backend unavailable")

        client = self._client_for(RegistrationService(store, BrokenHasher()))
        response = client.post("/register-student", json=valid_form)

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Internal server error"}
        assert store.load() == []


class TestListStudents:

    def test_disabled_without_admin_token(self, client, monkeypatch):
        monkeypatch.setattr(config, "ADMIN_TOKEN", "")
        response = client.get("/students")

        assert response.status_code == 403
        assert response.json()["success"] is False

    def test_wrong_token(self, client, monkeypatch):
        monkeypatch.setattr(config, "ADMIN_TOKEN", "letmein")

        assert client.get("/students").status_code == 401
        assert client.get("/students", headers={"X-Admin-Token": "nope"}).status_code == 401

    def test_round_trip_without_password(self, client, monkeypatch, valid_form):
        monkeypatch.setattr(config, "ADMIN_TOKEN", "letmein")
        client.post("/register-student", json=valid_form)

        response = client.get("/students", headers={"X-Admin-Token": "letmein"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        [student] = body["students"]
        submitted = {k: v for k, v in valid_form.items() if k not in ("password", "confirmPassword")}
        assert {k: student[k] for k in submitted} == submitted
        assert set(student) == set(submitted) | {"id", "createdAt"}
        assert "secret1" not in response.text
        assert "$2b$" not in response.text


class TestFileBackedRegistration:

    def test_store_file_holds_hash_not_password(self, tmp_path, hasher, valid_form):
        store = JsonFileStore(tmp_path / "students.json")
        store.initialize()
        app.dependency_overrides[get_registration_service] = lambda: RegistrationService(store, hasher)
        try:
            client = TestClient(app)
            assert client.post("/register-student", json=valid_form).status_code == 201
        finally:
            app.dependency_overrides.clear()

        raw = store.path.read_text()
        [stored] = json.loads(raw)
        assert "secret1" not in raw
        assert hasher.verify("secret1", stored["password"])
        assert stored["email"] == "a@b.com"


class TestAuxiliaryEndpoints:

    def test_validation_rules(self, client):
        rules = client.get("/api/validation-rules").json()
        assert rules["patterns"]["email"] == r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
        assert "confirmPassword" in rules["requiredFields"]

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"

    def test_form_page_is_served(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "registrationForm" in response.text
        assert 'method="post"' in response.text
        assert 'id="submitBtn" disabled' in response.text
