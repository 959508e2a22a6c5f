"""
StudyHub Backend - User and Profile Models
============================================

What:  ORM models for the `users` and `profiles` tables.
Who:   Read and written by the profile and enrollment workflows. Rows are
       created by the signup flow of the auth service, which shares this
       database.

Relationship notes:
    - `additional_details` is one-to-one in practice: every signup creates
      exactly one Profile and stores its id on the user.
    - `courses` mirrors the `user_courses` link table. It is view-only; the
      enrollment and deletion workflows write the link table directly so a
      repeated enrollment is a no-op rather than a duplicate row.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studyhub.database import Base


# Link table: which courses appear on a user's "courses" list.
# Composite primary key = set semantics.
user_courses = Table(
    "user_courses",
    Base.metadata,
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("course_id", Uuid, ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
)


class Profile(Base):
    """Personal attributes of a user. Blank strings mean "not provided"."""

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    gender: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    date_of_birth: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    about: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)
    contact_number: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    def __repr__(self) -> str:
        return f"<Profile(id={self.id})>"


class User(Base):
    """
    A learner, instructor or admin account.

    account_type values: "Student", "Instructor", "Admin".
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    account_type: Mapped[str] = mapped_column(String(20), nullable=False, default="Student")

    # Avatar URL: a placeholder from signup, later the image host's secure_url
    image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # SET NULL so the profile row can be removed independently of the user row
    additional_details_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    additional_details: Mapped[Optional[Profile]] = relationship(Profile)
    courses: Mapped[List["Course"]] = relationship(  # noqa: F821
        "Course",
        secondary=user_courses,
        viewonly=True,
        order_by="Course.created_at",
    )
    course_progress: Mapped[List["CourseProgress"]] = relationship(  # noqa: F821
        "CourseProgress",
        viewonly=True,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', account_type='{self.account_type}')>"
