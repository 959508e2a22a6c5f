"""
StudyHub Backend - Course Progress Model
==========================================

What:  One row per (user, course) enrollment plus the set of completed
       lectures in `progress_completed_videos`.
When:  Created with an empty completed set when a payment is verified;
       deleted with the account.
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import Column, DateTime, ForeignKey, Table, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studyhub.database import Base


progress_completed_videos = Table(
    "progress_completed_videos",
    Base.metadata,
    Column(
        "progress_id",
        Uuid,
        ForeignKey("course_progress.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "sub_section_id",
        Uuid,
        ForeignKey("sub_sections.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class CourseProgress(Base):
    __tablename__ = "course_progress"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    course_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    completed_videos: Mapped[List["SubSection"]] = relationship(  # noqa: F821
        "SubSection",
        secondary=progress_completed_videos,
        viewonly=True,
    )

    def __repr__(self) -> str:
        return f"<CourseProgress(id={self.id}, user_id={self.user_id}, course_id={self.course_id})>"
