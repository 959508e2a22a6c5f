"""
StudyHub Backend - Course Catalogue Models
============================================

What:  ORM models for `courses`, `sections`, `sub_sections` and the
       `course_students` roster table.
Who:   Written by the course-authoring service; read here for pricing,
       rosters, durations and instructor revenue.

Roster semantics:
    `course_students` has a composite primary key (course_id, user_id), so a
    user can be on a roster at most once. Writes go through
    enrollment_service.add_to_roster(), which checks before inserting.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studyhub.database import Base


course_students = Table(
    "course_students",
    Base.metadata,
    Column("course_id", Uuid, ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Course(Base):
    """A purchasable course. `price` is in major currency units (rupees)."""

    __tablename__ = "courses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    course_name: Mapped[str] = mapped_column(String(200), nullable=False)
    course_description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # NULL or 0 means "price not set"; such a course cannot be bought
    price: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    thumbnail: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    instructor_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    course_content: Mapped[List["Section"]] = relationship(
        "Section",
        order_by="Section.position",
        cascade="all, delete-orphan",
    )
    students_enrolled: Mapped[List["User"]] = relationship(  # noqa: F821
        "User",
        secondary=course_students,
        viewonly=True,
    )

    def __repr__(self) -> str:
        return f"<Course(id={self.id}, course_name='{self.course_name}', price={self.price})>"


class Section(Base):
    __tablename__ = "sections"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    course_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    section_name: Mapped[str] = mapped_column(String(200), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    sub_sections: Mapped[List["SubSection"]] = relationship(
        "SubSection",
        order_by="SubSection.position",
        cascade="all, delete-orphan",
    )


class SubSection(Base):
    """
    A single lecture.

    time_duration is the video length in seconds, stored as text because the
    video uploader writes whatever the media probe reports ("754.2", "").
    """

    __tablename__ = "sub_sections"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    section_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("sections.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    time_duration: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    video_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
