"""
Record collection storage.

The registration service talks to a ``StudentStore``; which one backs it is
decided by configuration:
- JsonFileStore: the whole collection as one JSON array in a flat file,
  loaded and rewritten in full on every change
- SqlStudentStore: one row per record, unique email enforced by the database
- InMemoryStore: list-backed, used by tests

Duplicate protection is expressed as ``insert_if_absent``. File and memory
stores serialise the load → scan → save cycle behind a lock; the SQL store
relies on its unique email index.
"""

import json
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app import config
from app.database import create_db_engine, create_tables, make_session_factory
from app.errors import StorageError
from app.logging_config import get_logger, log_with_context
from app.models.student import Student
from app.schemas import StudentRecord

logger = get_logger("store")


class StudentStore(ABC):
    """Ordered collection of StudentRecord objects keyed uniquely by email."""

    def __init__(self):
        self._lock = threading.Lock()

    def initialize(self):
        """Prepare the backing storage. Safe to call more than once."""

    @abstractmethod
    def load(self) -> List[StudentRecord]:
        """Return every record in insertion order."""

    @abstractmethod
    def save(self, records: List[StudentRecord]):
        """Replace the stored collection with ``records``."""

    def find_by_email(self, email: str) -> Optional[StudentRecord]:
        """Linear scan for an exact (case-sensitive) email match."""
        for record in self.load():
            if record.email == email:
                return record
        return None

    def insert_if_absent(self, record: StudentRecord) -> bool:
        """
        Append ``record`` unless its email is already stored.

        Returns False, leaving the collection untouched, when the email is
        taken. The read-check-write cycle holds the store lock, so two
        concurrent registrations for one email cannot both succeed.
        """
        with self._lock:
            records = self.load()
            if any(existing.email == record.email for existing in records):
                return False
            records.append(record)
            self.save(records)
            return True


class InMemoryStore(StudentStore):
    """List-backed store with no persistence."""

    def __init__(self, records: Optional[List[StudentRecord]] = None):
        super().__init__()
        self._records = list(records or [])

    def load(self) -> List[StudentRecord]:
        return list(self._records)

    def save(self, records: List[StudentRecord]):
        self._records = list(records)


class JsonFileStore(StudentStore):
    """
    The record collection as a pretty-printed JSON array on disk.

    A missing or blank file is an empty collection. Unreadable or corrupt
    content raises StorageError instead of being treated as empty, so a
    following save can never wipe existing registrations.
    """

    def __init__(self, path):
        super().__init__()
        self.path = Path(path)

    def initialize(self):
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._write([])
            log_with_context(logger, "INFO", "Created empty record file",
                             extra_data={"path": str(self.path)})

    def load(self) -> List[StudentRecord]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e

        if not raw.strip():
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt record file {self.path}: {e}") from e
        if not isinstance(data, list):
            raise StorageError(f"Record file {self.path} does not hold a JSON array")

        try:
            return [StudentRecord.model_validate(item) for item in data]
        except SchemaValidationError as e:
            raise StorageError(f"Invalid record in {self.path}: {e}") from e

    def save(self, records: List[StudentRecord]):
        self._write([record.to_storage() for record in records])
        log_with_context(logger, "DEBUG", "Saved record collection",
                         extra_data={"path": str(self.path), "records": len(records)})

    def _write(self, data: list):
        """Write to a temporary sibling file, then atomically replace."""
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile("w", encoding="utf-8", dir=self.path.parent,
                                             prefix=self.path.name, suffix=".tmp",
                                             delete=False) as tmp:
                tmp_name = tmp.name
                json.dump(data, tmp, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Cannot write {self.path}: {e}") from e


_RECORD_COLUMNS = [name for name in StudentRecord.model_fields]


def _row_to_record(row: Student) -> StudentRecord:
    return StudentRecord.model_validate({name: getattr(row, name) for name in _RECORD_COLUMNS})


def _record_to_row(record: StudentRecord) -> Student:
    return Student(**record.model_dump())


class SqlStudentStore(StudentStore):
    """Records as rows of the ``students`` table, via SQLAlchemy."""

    def __init__(self, engine):
        super().__init__()
        self.engine = engine
        self.SessionLocal = make_session_factory(engine)

    def initialize(self):
        try:
            create_tables(self.engine)
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot create tables: {e}") from e

    def load(self) -> List[StudentRecord]:
        try:
            with self.SessionLocal() as db:
                rows = db.query(Student).order_by(Student.seq).all()
                return [_row_to_record(row) for row in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot load students: {e}") from e

    def find_by_email(self, email: str) -> Optional[StudentRecord]:
        try:
            with self.SessionLocal() as db:
                row = db.query(Student).filter(Student.email == email).first()
                return _row_to_record(row) if row else None
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot query students: {e}") from e

    def save(self, records: List[StudentRecord]):
        try:
            with self.SessionLocal() as db:
                db.query(Student).delete()
                db.add_all([_record_to_row(record) for record in records])
                db.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot save students: {e}") from e

    def insert_if_absent(self, record: StudentRecord) -> bool:
        """Insert and let the unique email index reject duplicates.

        Any other constraint failure (e.g. an identifier collision) is a
        StorageError, not a duplicate registration.
        """
        with self.SessionLocal() as db:
            db.add(_record_to_row(record))
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                if self.find_by_email(record.email) is None:
                    raise StorageError(f"Cannot insert student: {e}") from e
                log_with_context(logger, "INFO", "Unique email index rejected insert",
                                 context={"student_id": record.id})
                return False
            except SQLAlchemyError as e:
                db.rollback()
                raise StorageError(f"Cannot insert student: {e}") from e
        return True


def build_store() -> StudentStore:
    """Create the store selected by STORAGE_BACKEND."""
    if config.STORAGE_BACKEND == "json":
        return JsonFileStore(config.STUDENTS_FILE)
    if config.STORAGE_BACKEND == "sql":
        return SqlStudentStore(create_db_engine(config.DATABASE_URL))
    raise ValueError(f"Unknown STORAGE_BACKEND: {config.STORAGE_BACKEND!r}")
