# Models package init
# Importing every model here registers it on Base.metadata (used by Alembic
# and by the test fixtures that call create_all).
from studyhub.models.course import Course, Section, SubSection, course_students
from studyhub.models.progress import CourseProgress, progress_completed_videos
from studyhub.models.user import Profile, User, user_courses

__all__ = [
    "Course",
    "CourseProgress",
    "Profile",
    "Section",
    "SubSection",
    "User",
    "course_students",
    "progress_completed_videos",
    "user_courses",
]
