"""
Pydantic schemas for registration requests and stored student records.

The wire and file formats use camelCase keys (``fullName``, ``pinCode``,
``createdAt``) to match the browser form, while Python code uses snake_case
attributes. Numeric form values are coerced to strings.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RegistrationRequest(BaseModel):
    """Body of POST /register-student. All fields arrive as optional strings;
    presence and format are checked by the shared validation rules."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    full_name: Optional[str] = None
    dob: Optional[str] = None
    gender: Optional[str] = None
    blood_group: Optional[str] = None
    nationality: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    alt_phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pin_code: Optional[str] = None
    course: Optional[str] = None
    branch: Optional[str] = None
    year: Optional[str] = None
    college: Optional[str] = None
    roll_number: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None

    def form_data(self) -> dict:
        """Return the submitted values keyed by their form (camelCase) names."""
        return self.model_dump(by_alias=True, exclude_none=True)


class StudentRecord(BaseModel):
    """One registrant as persisted in the record collection.

    ``password_hash`` is stored under the ``password`` key and is excluded
    from every client-facing representation.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    id: str
    full_name: str
    dob: Optional[str] = None
    gender: Optional[str] = None
    blood_group: Optional[str] = None
    nationality: Optional[str] = None
    email: str
    phone: Optional[str] = None
    alt_phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pin_code: Optional[str] = None
    course: Optional[str] = None
    branch: Optional[str] = None
    year: Optional[str] = None
    college: Optional[str] = None
    roll_number: Optional[str] = None
    password_hash: str = Field(alias="password")
    created_at: str

    def to_storage(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)

    def public_dict(self) -> dict:
        """Every stored field except the password hash."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"password_hash"})

    def summary(self) -> dict:
        return {"id": self.id, "fullName": self.full_name, "email": self.email}
