"""
StudyHub Backend - Enrollment Service Tests
=============================================

What we test:
    ✅ One enrollment writes roster, progress record and user course link
    ✅ Enrolling twice leaves exactly one roster entry and one progress record
    ✅ An unknown course is reported and the remaining courses still enroll
    ✅ A failed write inside one course rolls that course back, the next still enrolls
    ✅ A mail failure keeps the enrollment (enrolled=True, notified=False)
    ✅ Malformed course ids are reported per course
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import func, select

from studyhub.exceptions import ExternalServiceError
from studyhub.models import CourseProgress, course_students, user_courses
from studyhub.services.enrollment_service import EnrollmentService


async def _count(db, stmt) -> int:
    return await db.scalar(select(func.count()).select_from(stmt.subquery()))


class TestEnrollStudents:

    def setup_method(self):
        self.service = EnrollmentService()

    @pytest.mark.asyncio
    async def test_enroll_writes_all_three_links(self, db_session, make_user, make_course):
        user = await make_user()
        course = await make_course("Data Structures")

        with patch('studyhub.services.enrollment_service.mail_service') as mock_mail:
            mock_mail.send = AsyncMock()
            results = await self.service.enroll_students(db_session, [str(course.id)], str(user.id))

        assert len(results) == 1
        assert results[0].enrolled is True
        assert results[0].notified is True
        assert results[0].error is None
        assert results[0].success

        assert await self.service.is_enrolled(db_session, course.id, user.id)
        assert await _count(
            db_session,
            select(user_courses).where(user_courses.c.user_id == user.id),
        ) == 1
        assert await _count(
            db_session,
            select(CourseProgress).where(CourseProgress.user_id == user.id),
        ) == 1

        mock_mail.send.assert_awaited_once()
        to, subject, _body = mock_mail.send.await_args.args
        assert to == user.email
        assert subject == "Successfully Enrolled into Data Structures"

    @pytest.mark.asyncio
    async def test_enroll_twice_keeps_one_roster_entry(self, db_session, make_user, make_course):
        user = await make_user()
        course = await make_course()

        with patch('studyhub.services.enrollment_service.mail_service') as mock_mail:
            mock_mail.send = AsyncMock()
            await self.service.enroll_students(db_session, [course.id], user.id)
            second = await self.service.enroll_students(db_session, [course.id], user.id)

        assert second[0].enrolled is True
        assert await _count(
            db_session,
            select(course_students).where(course_students.c.course_id == course.id),
        ) == 1
        assert await _count(
            db_session,
            select(user_courses).where(user_courses.c.user_id == user.id),
        ) == 1
        assert await _count(
            db_session,
            select(CourseProgress).where(CourseProgress.user_id == user.id),
        ) == 1

    @pytest.mark.asyncio
    async def test_unknown_course_does_not_block_others(self, db_session, make_user, make_course):
        user = await make_user()
        good = await make_course("Algorithms")
        missing_id = str(uuid.uuid4())

        with patch('studyhub.services.enrollment_service.mail_service') as mock_mail:
            mock_mail.send = AsyncMock()
            results = await self.service.enroll_students(
                db_session, [missing_id, str(good.id)], str(user.id)
            )

        assert [r.course_id for r in results] == [missing_id, str(good.id)]
        assert results[0].enrolled is False
        assert results[0].error == f"Course not found: {missing_id}"
        assert results[1].enrolled is True
        assert await self.service.is_enrolled(db_session, good.id, user.id)

    @pytest.mark.asyncio
    async def test_unknown_user_is_reported(self, db_session, make_course):
        course = await make_course()
        ghost = uuid.uuid4()

        with patch('studyhub.services.enrollment_service.mail_service') as mock_mail:
            mock_mail.send = AsyncMock()
            results = await self.service.enroll_students(db_session, [str(course.id)], str(ghost))

        assert results[0].enrolled is False
        assert results[0].error == f"User not found: {ghost}"
        mock_mail.send.assert_not_awaited()
        assert not await self.service.is_enrolled(db_session, course.id, ghost)

    @pytest.mark.asyncio
    async def test_mail_failure_keeps_enrollment(self, db_session, make_user, make_course):
        user = await make_user()
        course = await make_course()

        with patch('studyhub.services.enrollment_service.mail_service') as mock_mail:
            mock_mail.send = AsyncMock(
                side_effect=ExternalServiceError("Mail", message="Could not send email")
            )
            results = await self.service.enroll_students(db_session, [str(course.id)], str(user.id))

        assert results[0].enrolled is True
        assert results[0].notified is False
        assert results[0].error == "Could not send email"
        assert not results[0].success
        assert await self.service.is_enrolled(db_session, course.id, user.id)

    @pytest.mark.asyncio
    async def test_failed_link_rolls_back_that_course_only(self, db_session, make_user, make_course):
        user = await make_user()
        first = await make_course("Compilers")
        second = await make_course("Networks")
        real_link = self.service.link_course_to_user
        calls = []

        async def link_fails_once(db, user_id, course_id):
            calls.append(course_id)
            if len(calls) == 1:
                raise RuntimeError("link write failed")
            return await real_link(db, user_id, course_id)

        with patch('studyhub.services.enrollment_service.mail_service') as mock_mail, \
                patch.object(self.service, "link_course_to_user", side_effect=link_fails_once):
            mock_mail.send = AsyncMock()
            results = await self.service.enroll_students(
                db_session, [str(first.id), str(second.id)], str(user.id)
            )

        assert results[0].enrolled is False
        assert results[0].error == "Enrollment failed"
        assert results[1].enrolled is True

        assert not await self.service.is_enrolled(db_session, first.id, user.id)
        assert await _count(
            db_session,
            select(CourseProgress).where(CourseProgress.course_id == first.id),
        ) == 0
        assert await self.service.is_enrolled(db_session, second.id, user.id)
        assert await _count(
            db_session,
            select(CourseProgress).where(CourseProgress.course_id == second.id),
        ) == 1
        mock_mail.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_malformed_course_id_is_reported(self, db_session, make_user):
        user = await make_user()

        with patch('studyhub.services.enrollment_service.mail_service') as mock_mail:
            mock_mail.send = AsyncMock()
            results = await self.service.enroll_students(db_session, ["not-a-uuid"], str(user.id))

        assert results[0].enrolled is False
        assert results[0].error == "Invalid course id: not-a-uuid"


class TestRosterHelpers:

    def setup_method(self):
        self.service = EnrollmentService()

    @pytest.mark.asyncio
    async def test_add_to_roster_reports_existing_membership(self, db_session, make_user, make_course):
        user = await make_user()
        course = await make_course()

        assert await self.service.add_to_roster(db_session, course.id, user.id) is True
        assert await self.service.add_to_roster(db_session, course.id, user.id) is False

    @pytest.mark.asyncio
    async def test_existing_progress_is_reused(self, db_session, make_user, make_course, enroll):
        user = await make_user()
        course = await make_course()
        original = await enroll(user, course)

        progress = await self.service.get_or_create_progress(db_session, course.id, user.id)

        assert progress.id == original.id
