"""
StudyHub Backend - Enrollment Service
=======================================

What:  Puts a user into one or more courses after a verified payment.
How:   For each course, in order:
           1. add the user to the course roster (if not already there)
           2. create the CourseProgress record (empty completed set)
           3. add the course to the user's course list (if not already there)
           4. send the enrollment email

Batch semantics:
    Courses are independent. A failure on one course (unknown course,
    unknown user, mail relay down) is logged and recorded in that course's
    EnrollmentResult; the loop moves on to the next course. Nothing already
    done for earlier courses is undone.

    Steps 1-3 for a single course run inside one savepoint, so a course is
    either fully linked (roster + progress + user list) or not touched at
    all. The email is sent after the savepoint is released; if it fails the
    enrollment stands and the result reads enrolled=True, notified=False.
"""

import logging
import uuid
from typing import Iterable, List, Tuple

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.exceptions import NotFoundError, StudyHubError
from studyhub.mail.templates import course_enrollment_email
from studyhub.models import Course, CourseProgress, User, course_students, user_courses
from studyhub.schemas.payment import EnrollmentResult
from studyhub.services.mail_service import mail_service
from studyhub.utils.ids import parse_uuid

logger = logging.getLogger(__name__)


class EnrollmentService:

    async def is_enrolled(self, db: AsyncSession, course_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        """True when the user is on the course roster."""
        found = await db.scalar(
            select(course_students.c.user_id).where(
                course_students.c.course_id == course_id,
                course_students.c.user_id == user_id,
            )
        )
        return found is not None

    async def add_to_roster(self, db: AsyncSession, course_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        """Add user to the roster with set semantics. Returns False if already there."""
        if await self.is_enrolled(db, course_id, user_id):
            return False
        await db.execute(insert(course_students).values(course_id=course_id, user_id=user_id))
        return True

    async def link_course_to_user(self, db: AsyncSession, user_id: uuid.UUID, course_id: uuid.UUID) -> bool:
        """Add the course to the user's course list with set semantics."""
        found = await db.scalar(
            select(user_courses.c.course_id).where(
                user_courses.c.user_id == user_id,
                user_courses.c.course_id == course_id,
            )
        )
        if found is not None:
            return False
        await db.execute(insert(user_courses).values(user_id=user_id, course_id=course_id))
        return True

    async def get_or_create_progress(
        self, db: AsyncSession, course_id: uuid.UUID, user_id: uuid.UUID
    ) -> CourseProgress:
        # One progress record per (user, course): a repeated enrollment keeps
        # the completed lectures of the first one.
        progress = await db.scalar(
            select(CourseProgress)
            .where(CourseProgress.course_id == course_id, CourseProgress.user_id == user_id)
            .limit(1)
        )
        if progress is None:
            progress = CourseProgress(course_id=course_id, user_id=user_id)
            db.add(progress)
            await db.flush()
        return progress

    async def _enroll_one(self, db: AsyncSession, course_id, user_id: uuid.UUID) -> Tuple[Course, User]:
        cid = parse_uuid(course_id, "course")

        course = await db.get(Course, cid)
        if course is None:
            raise NotFoundError("Course", str(course_id))

        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError("User", str(user_id))

        async with db.begin_nested():
            await self.add_to_roster(db, cid, user_id)
            progress = await self.get_or_create_progress(db, cid, user_id)
            await self.link_course_to_user(db, user_id, cid)

        logger.debug("Progress record %s ready for user %s", progress.id, user_id)
        return course, user

    async def enroll_students(
        self,
        db: AsyncSession,
        courses: Iterable,
        user_id,
    ) -> List[EnrollmentResult]:
        """
        Enroll one user into every course in `courses`, best effort.

        Args:
            db: Async database session
            courses: Course ids (UUIDs or UUID strings)
            user_id: The paying user

        Returns:
            One EnrollmentResult per course, in input order. Never raises for
            a per-course failure.
        """
        results: List[EnrollmentResult] = []
        uid = parse_uuid(user_id, "user")

        for course_id in courses:
            result = EnrollmentResult(course_id=str(course_id))
            try:
                course, user = await self._enroll_one(db, course_id, uid)
                result.enrolled = True

                await mail_service.send(
                    user.email,
                    f"Successfully Enrolled into {course.course_name}",
                    course_enrollment_email(course.course_name, user.full_name),
                )
                result.notified = True
                logger.info("Enrolled %s in %s", user.email, course.course_name)

            except StudyHubError as e:
                logger.error("Enrollment error for course %s: %s", course_id, e.message)
                result.error = e.message
            except Exception as e:
                logger.error(
                    "Unexpected enrollment error for course %s: %s",
                    course_id,
                    str(e),
                    exc_info=True,
                )
                result.error = "Enrollment failed"

            results.append(result)

        enrolled = sum(1 for r in results if r.enrolled)
        logger.info(
            "Enrollment batch for user %s: %d/%d courses enrolled",
            uid,
            enrolled,
            len(results),
        )
        return results


enrollment_service = EnrollmentService()
