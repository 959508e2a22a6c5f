"""
StudyHub Backend - Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the whole suite.
How:   Services run against a real in-memory SQLite database (aiosqlite) so
       link-table writes, savepoints and foreign keys are exercised for
       real. External services (gateway, image host, SMTP) are patched per
       test or driven through httpx.MockTransport.

Fixture Hierarchy (all function-scoped):
    ├── engine:          fresh in-memory database with all tables
    │   └── db_session:  AsyncSession bound to it
    │       ├── make_user / make_course / make_progress: row factories
    │       └── api_client: ASGI client with the session dependency overridden
    └── auth_headers:    Authorization header for a signed test token
"""

import os

# Settings are read at import time: set the test environment BEFORE any
# studyhub import.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_studyhub.db"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["RAZORPAY_KEY"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "test-razorpay-secret"
# Image host left unconfigured: adapter tests build their own uploaders
os.environ["CLOUD_NAME"] = ""
os.environ["API_KEY"] = ""
os.environ["API_SECRET"] = ""
os.environ["STUDYHUB_BASE_URL"] = "http://localhost:4000/api/v1"
os.environ["RETRY_MAX_ATTEMPTS"] = "1"
os.environ["RETRY_MIN_WAIT"] = "0"
os.environ["LOG_LEVEL"] = "WARNING"

import uuid
from typing import Optional

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event, insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from studyhub.database import Base, get_db_session
from studyhub.models import (
    Course,
    CourseProgress,
    Profile,
    Section,
    SubSection,
    User,
    course_students,
    progress_completed_videos,
    user_courses,
)

TEST_JWT_SECRET = "test-jwt-secret"
TEST_RAZORPAY_SECRET = "test-razorpay-secret"


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def engine():
    """
    In-memory SQLite shared by every connection of one test (StaticPool).

    pysqlite's own transaction handling breaks SAVEPOINT, so the driver is
    put in autocommit mode and SQLAlchemy emits BEGIN itself.
    """
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(test_engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(test_engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Row Factories
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_user(db_session):
    async def _make_user(
        email: Optional[str] = None,
        account_type: str = "Student",
        first_name: str = "Asha",
        last_name: str = "Verma",
        with_profile: bool = True,
    ) -> User:
        profile = None
        if with_profile:
            profile = Profile(gender="", date_of_birth="", about="", contact_number="")
            db_session.add(profile)
            await db_session.flush()

        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email or f"{uuid.uuid4().hex[:10]}@example.com",
            account_type=account_type,
            image="https://api.dicebear.com/5.x/initials/svg?seed=AV",
            additional_details_id=profile.id if profile else None,
        )
        db_session.add(user)
        await db_session.flush()
        return user

    return _make_user


@pytest.fixture
def make_course(db_session):
    async def _make_course(
        name: str = "Python Basics",
        price: Optional[int] = 500,
        instructor: Optional[User] = None,
        durations: Optional[list] = None,
    ) -> Course:
        """durations: one list of lecture lengths (seconds, as stored text) per section."""
        course = Course(
            course_name=name,
            course_description=f"Learn {name}",
            price=price,
            thumbnail="https://cdn.example.com/thumb.png",
            instructor_id=instructor.id if instructor else None,
        )
        db_session.add(course)
        await db_session.flush()

        for s_index, section_durations in enumerate(durations or []):
            section = Section(course_id=course.id, section_name=f"Section {s_index + 1}", position=s_index)
            db_session.add(section)
            await db_session.flush()
            for l_index, seconds in enumerate(section_durations):
                db_session.add(
                    SubSection(
                        section_id=section.id,
                        title=f"Lecture {l_index + 1}",
                        time_duration=seconds,
                        position=l_index,
                    )
                )
            await db_session.flush()
        return course

    return _make_course


@pytest.fixture
def enroll(db_session):
    """Write an enrollment directly (roster + user link + progress)."""
    async def _enroll(user: User, course: Course, completed=()) -> CourseProgress:
        await db_session.execute(insert(course_students).values(course_id=course.id, user_id=user.id))
        await db_session.execute(insert(user_courses).values(user_id=user.id, course_id=course.id))
        progress = CourseProgress(course_id=course.id, user_id=user.id)
        db_session.add(progress)
        await db_session.flush()
        for sub_section_id in completed:
            await db_session.execute(
                insert(progress_completed_videos).values(
                    progress_id=progress.id, sub_section_id=sub_section_id
                )
            )
        return progress

    return _enroll


# ══════════════════════════════════════════════════════════════════════════
# HTTP
# ══════════════════════════════════════════════════════════════════════════

def make_token(user: User, secret: str = TEST_JWT_SECRET) -> str:
    return jwt.encode(
        {"id": str(user.id), "email": user.email, "accountType": user.account_type},
        secret,
        algorithm="HS256",
    )


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        return {"Authorization": f"Bearer {make_token(user)}"}

    return _auth_headers


@pytest_asyncio.fixture
async def api_client(db_session):
    """
    ASGI client for endpoint tests. Requests share the test's session, so
    rows created by factories are visible to the routes and vice versa.
    """
    from studyhub.main import app

    async def _override_session():
        yield db_session

    app.dependency_overrides[get_db_session] = _override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
