"""
StudyHub Backend - Profile Service
====================================

What:  Account-level operations on the signed-in user: profile edits, avatar
       upload, account deletion, enrolled-course listing with progress, and
       the instructor revenue summary.
Who:   Called by the /api/v1/profile/* route handlers.

Account deletion order:
    Link tables are cleared with Core DELETEs before the rows they point at,
    so the sequence is valid with foreign keys enforced:
        1. pull the user from every course roster
        2. drop the user's course links
        3. drop the completed-lecture rows, then the progress records
        4. delete the user row
        5. delete the profile row
    All of it happens in the request session and commits once. The ORM
    DELETEs synchronize the identity map, so loaded User/Profile/
    CourseProgress objects are dropped from the session as well.
"""

import logging
import uuid
from typing import Dict, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from studyhub.config import settings
from studyhub.exceptions import DatabaseError, NotFoundError, ValidationError
from studyhub.models import (
    Course,
    CourseProgress,
    Profile,
    Section,
    User,
    course_students,
    progress_completed_videos,
    user_courses,
)
from studyhub.schemas.profile import (
    EnrolledCourseOut,
    InstructorCourseStats,
    ProfileUpdate,
    UserOut,
)
from studyhub.services.image_uploader import image_uploader
from studyhub.utils.duration import (
    compute_progress_percentage,
    convert_seconds_to_duration,
    parse_duration_seconds,
)
from studyhub.utils.ids import parse_uuid

logger = logging.getLogger(__name__)


class ProfileService:

    async def _load_user(self, db: AsyncSession, user_id: uuid.UUID) -> Optional[User]:
        # populate_existing: the identity map may hold this user from earlier
        # in the request with a stale profile attached
        return await db.scalar(
            select(User)
            .where(User.id == user_id)
            .options(selectinload(User.additional_details))
            .execution_options(populate_existing=True)
        )

    async def update_profile(self, db: AsyncSession, user_id: str, update: ProfileUpdate) -> UserOut:
        """
        Replace the user's name and profile fields with `update`.

        Every field is written; omitted ones arrive as "" and blank the
        stored value.

        Raises:
            NotFoundError: user or profile missing
        """
        uid = parse_uuid(user_id, "user")
        user = await self._load_user(db, uid)
        if user is None:
            raise NotFoundError("User", message="User not found")

        profile = user.additional_details
        if profile is None:
            raise NotFoundError("Profile", message="Profile not found")

        user.first_name = update.first_name
        user.last_name = update.last_name

        profile.date_of_birth = update.date_of_birth
        profile.about = update.about
        profile.contact_number = update.contact_number
        profile.gender = update.gender

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to update profile for %s: %s", uid, str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})

        logger.info("Profile updated for user %s", uid)
        return UserOut.model_validate(user)

    async def delete_account(self, db: AsyncSession, user_id: str) -> None:
        """
        Remove the user and everything that hangs off the account.

        Raises:
            NotFoundError: user missing
            DatabaseError: a delete failed (the request session rolls back)
        """
        uid = parse_uuid(user_id, "user")
        user = await db.get(User, uid)
        if user is None:
            raise NotFoundError("User", message="User not found")

        profile_id = user.additional_details_id

        try:
            rosters = await db.execute(
                delete(course_students).where(course_students.c.user_id == uid)
            )
            await db.execute(delete(user_courses).where(user_courses.c.user_id == uid))

            progress_ids = select(CourseProgress.id).where(CourseProgress.user_id == uid)
            await db.execute(
                delete(progress_completed_videos).where(
                    progress_completed_videos.c.progress_id.in_(progress_ids)
                )
            )
            progress = await db.execute(delete(CourseProgress).where(CourseProgress.user_id == uid))

            await db.execute(delete(User).where(User.id == uid))
            if profile_id is not None:
                await db.execute(delete(Profile).where(Profile.id == profile_id))
        except SQLAlchemyError as e:
            logger.error("Failed to delete account %s: %s", uid, str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})

        logger.info(
            "Deleted account %s (%d roster entries, %d progress records)",
            uid,
            rosters.rowcount,
            progress.rowcount,
        )

    async def get_all_user_details(self, db: AsyncSession, user_id: str) -> UserOut:
        uid = parse_uuid(user_id, "user")
        user = await self._load_user(db, uid)
        if user is None:
            raise NotFoundError("User", message="User not found")
        return UserOut.model_validate(user)

    async def update_display_picture(
        self,
        db: AsyncSession,
        user_id: str,
        content: Optional[bytes],
        filename: Optional[str],
    ) -> UserOut:
        """
        Upload a new avatar and point the user's image at it.

        The image is scaled down on ingest to fit the configured square
        (1000x1000 by default).

        Raises:
            ValidationError: no file posted
            NotFoundError: user missing (checked before uploading)
            ExternalServiceError: image host failure
        """
        if not content:
            raise ValidationError("Please upload a display picture", field="displayPicture")

        uid = parse_uuid(user_id, "user")
        user = await self._load_user(db, uid)
        if user is None:
            raise NotFoundError("User", message="User not found")

        size = settings.display_picture_size
        result = await image_uploader.upload_image(
            content,
            filename or "display-picture",
            folder=settings.folder_name,
            height=size,
            width=size,
        )

        user.image = result["secure_url"]
        await db.flush()
        logger.info("Display picture updated for user %s", uid)
        return UserOut.model_validate(user)

    async def _completed_counts(self, db: AsyncSession, user_id: uuid.UUID) -> Dict[uuid.UUID, int]:
        rows = await db.execute(
            select(
                CourseProgress.course_id,
                func.count(progress_completed_videos.c.sub_section_id),
            )
            .outerjoin(
                progress_completed_videos,
                progress_completed_videos.c.progress_id == CourseProgress.id,
            )
            .where(CourseProgress.user_id == user_id)
            .group_by(CourseProgress.course_id)
        )
        return {course_id: count for course_id, count in rows.all()}

    async def get_enrolled_courses(self, db: AsyncSession, user_id: str) -> List[EnrolledCourseOut]:
        """
        The user's courses, each with its total length and completion percentage.

        Raises:
            NotFoundError: "Could not find user with id: <id>"
        """
        uid = parse_uuid(user_id, "user")
        user = await db.scalar(
            select(User)
            .where(User.id == uid)
            .options(
                selectinload(User.courses)
                .selectinload(Course.course_content)
                .selectinload(Section.sub_sections)
            )
            .execution_options(populate_existing=True)
        )
        if user is None:
            raise NotFoundError("User", message=f"Could not find user with id: {user_id}")

        completed = await self._completed_counts(db, uid)

        enrolled: List[EnrolledCourseOut] = []
        for course in user.courses:
            total_seconds = 0
            lecture_count = 0
            for section in course.course_content:
                for sub in section.sub_sections:
                    total_seconds += parse_duration_seconds(sub.time_duration)
                    lecture_count += 1

            enrolled.append(
                EnrolledCourseOut(
                    id=course.id,
                    course_name=course.course_name,
                    course_description=course.course_description,
                    price=course.price,
                    thumbnail=course.thumbnail,
                    total_duration=convert_seconds_to_duration(total_seconds),
                    progress_percentage=compute_progress_percentage(
                        completed.get(course.id, 0), lecture_count
                    ),
                )
            )

        return enrolled

    async def instructor_dashboard(self, db: AsyncSession, instructor_id: str) -> List[InstructorCourseStats]:
        """Per-course student count and revenue (count x price, unset price = 0)."""
        iid = parse_uuid(instructor_id, "instructor")
        student_count = func.count(course_students.c.user_id)
        rows = await db.execute(
            select(Course, student_count)
            .outerjoin(course_students, course_students.c.course_id == Course.id)
            .where(Course.instructor_id == iid)
            .group_by(Course.id)
            .order_by(Course.created_at)
        )

        stats = [
            InstructorCourseStats(
                id=course.id,
                course_name=course.course_name,
                course_description=course.course_description,
                total_students_enrolled=count,
                total_amount_generated=count * (course.price or 0),
            )
            for course, count in rows.all()
        ]
        logger.debug("Dashboard for instructor %s: %d course(s)", iid, len(stats))
        return stats


profile_service = ProfileService()
