"""Create users, courses, rosters and progress tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial schema for accounts, the course catalogue, the two
       enrollment link tables and per-course progress.
How:   Link tables use composite primary keys, so a user can appear on a
       roster (and a course on a user's list) at most once.

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("gender", sa.String(32), nullable=True),
        sa.Column("date_of_birth", sa.String(32), nullable=True),
        sa.Column("about", sa.String(2000), nullable=True),
        sa.Column("contact_number", sa.String(32), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False, server_default=sa.text("''")),
        sa.Column("last_name", sa.String(100), nullable=False, server_default=sa.text("''")),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column(
            "account_type",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'Student'"),
            comment="Student, Instructor or Admin",
        ),
        sa.Column("image", sa.String(500), nullable=True),
        sa.Column("additional_details_id", sa.Uuid(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["additional_details_id"], ["profiles.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "courses",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("course_name", sa.String(200), nullable=False),
        sa.Column("course_description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("price", sa.Integer(), nullable=True, comment="Rupees; NULL or 0 = not for sale"),
        sa.Column("thumbnail", sa.String(500), nullable=True),
        sa.Column("instructor_id", sa.Uuid(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["instructor_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_courses_instructor_id", "courses", ["instructor_id"])

    op.create_table(
        "sections",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("course_id", sa.Uuid(), nullable=False),
        sa.Column("section_name", sa.String(200), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.ForeignKeyConstraint(["course_id"], ["courses.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sections_course_id", "sections", ["course_id"])

    op.create_table(
        "sub_sections",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("section_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("time_duration", sa.String(32), nullable=True, comment="Seconds, as text"),
        sa.Column("video_url", sa.String(500), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.ForeignKeyConstraint(["section_id"], ["sections.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sub_sections_section_id", "sub_sections", ["section_id"])

    op.create_table(
        "course_students",
        sa.Column("course_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(["course_id"], ["courses.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("course_id", "user_id"),
    )

    op.create_table(
        "user_courses",
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("course_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["course_id"], ["courses.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id", "course_id"),
    )

    op.create_table(
        "course_progress",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("course_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["course_id"], ["courses.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_course_progress_course_id", "course_progress", ["course_id"])
    op.create_index("ix_course_progress_user_id", "course_progress", ["user_id"])

    op.create_table(
        "progress_completed_videos",
        sa.Column("progress_id", sa.Uuid(), nullable=False),
        sa.Column("sub_section_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(["progress_id"], ["course_progress.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["sub_section_id"], ["sub_sections.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("progress_id", "sub_section_id"),
    )


def downgrade() -> None:
    op.drop_table("progress_completed_videos")
    op.drop_index("ix_course_progress_user_id", table_name="course_progress")
    op.drop_index("ix_course_progress_course_id", table_name="course_progress")
    op.drop_table("course_progress")
    op.drop_table("user_courses")
    op.drop_table("course_students")
    op.drop_index("ix_sub_sections_section_id", table_name="sub_sections")
    op.drop_table("sub_sections")
    op.drop_index("ix_sections_course_id", table_name="sections")
    op.drop_table("sections")
    op.drop_index("ix_courses_instructor_id", table_name="courses")
    op.drop_table("courses")
    op.drop_table("users")
    op.drop_table("profiles")
