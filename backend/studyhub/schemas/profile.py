"""
StudyHub Backend - Profile Request/Response Schemas
=====================================================

ProfileUpdate blanking policy:
    The profile form always posts the whole form, so an update replaces every
    field. A field that is omitted (or sent as null) is stored as "" rather
    than left unchanged: `{"about": "x"}` clears firstName, lastName,
    dateOfBirth, contactNumber and gender.
"""

import uuid
from typing import Optional

from pydantic import Field, field_validator

from studyhub.schemas.common import CamelModel


class ProfileUpdate(CamelModel):
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    date_of_birth: str = Field(default="", max_length=32)
    about: str = Field(default="", max_length=2000)
    contact_number: str = Field(default="", max_length=32)
    gender: str = Field(default="", max_length=32)

    @field_validator("*", mode="before")
    @classmethod
    def blank_when_null(cls, v):
        """null is treated like an omitted field; numbers are kept as text."""
        if v is None:
            return ""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class ProfileOut(CamelModel):
    id: uuid.UUID
    gender: Optional[str] = None
    date_of_birth: Optional[str] = None
    about: Optional[str] = None
    contact_number: Optional[str] = None


class UserOut(CamelModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    account_type: str
    image: Optional[str] = None
    additional_details: Optional[ProfileOut] = None


class EnrolledCourseOut(CamelModel):
    id: uuid.UUID
    course_name: str
    course_description: str
    price: Optional[int] = None
    thumbnail: Optional[str] = None
    total_duration: str = Field(description='Sum of lecture lengths, e.g. "1h 20m"')
    progress_percentage: float = Field(description="0-100, two decimals")


class InstructorCourseStats(CamelModel):
    id: uuid.UUID
    course_name: str
    course_description: str
    total_students_enrolled: int
    total_amount_generated: int
