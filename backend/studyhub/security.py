"""
StudyHub Backend - Request Authentication
===========================================

What:  FastAPI dependencies that turn the caller's JWT into a CurrentUser
       and gate instructor-only routes.
How:   Tokens are issued by the auth service at login, signed with
       JWT_SECRET, and carry {"id", "email", "accountType"}. They arrive
       either as the `token` cookie (browser) or as `Authorization: Bearer`
       (other clients). This service only verifies them.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Depends, Request

from studyhub.config import settings
from studyhub.exceptions import AuthenticationError, PermissionDeniedError

logger = logging.getLogger(__name__)

INSTRUCTOR = "Instructor"


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: str
    account_type: str


def _extract_token(request: Request) -> Optional[str]:
    token = request.cookies.get("token")
    if token:
        return token
    auth_header = request.headers.get("Authorization", "")
    if auth_header[:7].lower() == "bearer ":
        return auth_header[7:].strip() or None
    return None


def decode_token(token: str) -> CurrentUser:
    """
    Verify a token and return its claims.

    Raises:
        AuthenticationError: bad signature, expired, or missing the id claim
    """
    if not settings.jwt_secret:
        raise AuthenticationError("Authentication is not configured")
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        logger.warning("Token has expired")
        raise AuthenticationError("Token has expired")
    except jwt.PyJWTError as e:
        logger.warning("Invalid token: %s", str(e))
        raise AuthenticationError("Token is invalid")

    user_id = payload.get("id")
    if not user_id:
        raise AuthenticationError("Token is invalid")
    return CurrentUser(
        id=str(user_id),
        email=payload.get("email", ""),
        account_type=payload.get("accountType", ""),
    )


async def get_current_user(request: Request) -> CurrentUser:
    token = _extract_token(request)
    if not token:
        raise AuthenticationError("Token is missing")
    return decode_token(token)


async def require_instructor(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if user.account_type != INSTRUCTOR:
        raise PermissionDeniedError("This is a protected route for Instructors only")
    return user
