"""
Runtime configuration read from environment variables.

Values are resolved once at import time. Tests override individual
attributes (e.g. ``config.ADMIN_TOKEN``) with monkeypatch.
"""

import os
from pathlib import Path

# Network
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))

# Storage: "json" keeps the flat record file, "sql" uses SQLAlchemy
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "json").lower()
STUDENTS_FILE = os.getenv("STUDENTS_FILE", "./students.json")
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./students.db")

# Password hashing work factor (bcrypt cost)
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))

# Shared secret for GET /students. Empty disables the listing endpoint.
ADMIN_TOKEN = os.getenv("ADMIN_TOKEN", "")

# Static form assets
PUBLIC_DIR = Path(os.getenv("PUBLIC_DIR", str(Path(__file__).resolve().parents[2] / "public")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
