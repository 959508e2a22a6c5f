"""
StudyHub Backend - Profile Route Handlers
===========================================

What:  Account endpoints under /api/v1/profile for the signed-in user.

Route Inventory:
    PUT    /updateProfile         name + profile fields
    DELETE /deleteProfile         remove the account
    GET    /getUserDetails        user with profile
    PUT    /updateDisplayPicture  multipart field `displayPicture`
    GET    /getEnrolledCourses    courses with duration and progress
    GET    /instructorDashboard   per-course students and revenue (Instructor)
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.database import get_db_session
from studyhub.schemas.common import ApiResponse, ErrorResponse
from studyhub.schemas.profile import (
    EnrolledCourseOut,
    InstructorCourseStats,
    ProfileUpdate,
    UserOut,
)
from studyhub.security import CurrentUser, get_current_user, require_instructor
from studyhub.services.profile_service import profile_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/profile", tags=["Profile"])

_ERRORS = {
    400: {"description": "Invalid request", "model": ErrorResponse},
    401: {"description": "Not signed in", "model": ErrorResponse},
    404: {"description": "User not found", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.put("/updateProfile", response_model=ApiResponse[UserOut], responses=_ERRORS)
async def update_profile(
    body: ProfileUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[UserOut]:
    updated = await profile_service.update_profile(db, user.id, body)
    return ApiResponse(message="Profile updated successfully", data=updated)


@router.delete("/deleteProfile", response_model=ApiResponse[None], responses=_ERRORS)
async def delete_account(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[None]:
    await profile_service.delete_account(db, user.id)
    return ApiResponse(message="User deleted successfully")


@router.get("/getUserDetails", response_model=ApiResponse[UserOut], responses=_ERRORS)
async def get_all_user_details(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[UserOut]:
    details = await profile_service.get_all_user_details(db, user.id)
    return ApiResponse(message="User data fetched successfully", data=details)


@router.put("/updateDisplayPicture", response_model=ApiResponse[UserOut], responses=_ERRORS)
async def update_display_picture(
    display_picture: Optional[UploadFile] = File(default=None, alias="displayPicture"),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[UserOut]:
    content: Optional[bytes] = None
    filename: Optional[str] = None
    if display_picture is not None:
        try:
            content = await display_picture.read()
            filename = display_picture.filename
        finally:
            await display_picture.close()

    updated = await profile_service.update_display_picture(db, user.id, content, filename)
    return ApiResponse(message="Image Updated successfully", data=updated)


@router.get(
    "/getEnrolledCourses",
    response_model=ApiResponse[List[EnrolledCourseOut]],
    responses=_ERRORS,
)
async def get_enrolled_courses(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[List[EnrolledCourseOut]]:
    courses = await profile_service.get_enrolled_courses(db, user.id)
    return ApiResponse(data=courses)


@router.get(
    "/instructorDashboard",
    response_model=ApiResponse[List[InstructorCourseStats]],
    responses={**_ERRORS, 403: {"description": "Not an instructor", "model": ErrorResponse}},
)
async def instructor_dashboard(
    user: CurrentUser = Depends(require_instructor),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[List[InstructorCourseStats]]:
    stats = await profile_service.instructor_dashboard(db, user.id)
    if not stats:
        return ApiResponse(message="No courses found for this instructor", data=[])
    return ApiResponse(data=stats)
