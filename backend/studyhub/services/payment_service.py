"""
StudyHub Backend - Payment Service (Business Logic Orchestrator)
==================================================================

What:  Checkout flow: price the cart, open a gateway order, verify the
       signed payment result, then hand the paid courses to enrollment.
Why:   Keeps gateway and enrollment rules out of the route handlers.
Who:   Called by the /api/v1/payment/* route handlers.

Checkout Flow:
    ┌───────────────┐    ┌────────────────┐    ┌──────────────────┐
    │ capture       │───▶│ client pays in │───▶│ verify           │
    │ (price, order)│    │ gateway widget │    │ (HMAC, enroll)   │
    └───────────────┘    └────────────────┘    └──────────────────┘
                                                        │
                                          send_payment_success_email

Error Recovery:
    capture: the first bad course aborts before any order exists
    verify:  a bad signature aborts before any enrollment; once the
             signature holds, per-course enrollment failures are reported in
             the results and never flip the response to an error
"""

import json
import logging
import time
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.config import settings
from studyhub.exceptions import (
    AlreadyEnrolledError,
    DatabaseError,
    InvalidPriceError,
    InvalidSignatureError,
    MissingFieldsError,
    NotFoundError,
    ValidationError,
)
from studyhub.mail.templates import payment_success_email
from studyhub.models import Course, User
from studyhub.schemas.payment import EnrollmentResult
from studyhub.services.enrollment_service import enrollment_service
from studyhub.services.mail_service import mail_service
from studyhub.services.razorpay_gateway import razorpay_gateway
from studyhub.utils.ids import parse_uuid

logger = logging.getLogger(__name__)


class PaymentService:
    """
    Business logic for the checkout endpoints.

    Stateless: every method receives the request's database session.
    """

    async def capture_payment(
        self,
        db: AsyncSession,
        courses: Any,
        user_id: str,
    ) -> Dict[str, Any]:
        """
        Validate the cart and create a gateway order for its total.

        Args:
            db: Async database session
            courses: Course ids as sent by the client (must be a non-empty list)
            user_id: Authenticated buyer

        Returns:
            The order JSON from the gateway (id, amount, currency, ...)

        Raises:
            ValidationError: empty or malformed course list
            NotFoundError: a course id does not exist
            AlreadyEnrolledError: the buyer already owns one of the courses
            InvalidPriceError: a course has no price
            ExternalServiceError: the gateway refused or was unreachable
        """
        if not isinstance(courses, list) or not courses:
            raise ValidationError("Please provide Course IDs", field="courses")

        uid = parse_uuid(user_id, "user")
        total_amount = 0

        try:
            for course_id in courses:
                cid = parse_uuid(course_id, "course")

                course = await db.get(Course, cid)
                if course is None:
                    raise NotFoundError("Course", str(course_id))

                if await enrollment_service.is_enrolled(db, cid, uid):
                    raise AlreadyEnrolledError(str(course_id))

                if not course.price:
                    raise InvalidPriceError(str(course_id))

                total_amount += course.price
        except SQLAlchemyError as e:
            logger.error("Failed to price cart for user %s: %s", uid, str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})

        # Gateway amounts are integer paise
        order = await razorpay_gateway.create_order(
            amount=total_amount * 100,
            currency=settings.payment_currency,
            receipt=f"receipt_{int(time.time() * 1000)}",
            notes={
                "userId": str(uid),
                "courses": json.dumps([str(c) for c in courses]),
            },
        )
        logger.info(
            "Order %s opened for user %s: %d course(s), total %d",
            order.get("id"),
            uid,
            len(courses),
            total_amount,
        )
        return order

    async def verify_payment(
        self,
        db: AsyncSession,
        order_id: Optional[str],
        payment_id: Optional[str],
        signature: Optional[str],
        courses: Optional[List[Any]],
        user_id: Optional[str],
    ) -> List[EnrollmentResult]:
        """
        Check the gateway signature and enroll the buyer into the paid courses.

        Returns:
            Per-course enrollment results. The payment counts as verified
            regardless of what they contain.

        Raises:
            MissingFieldsError: an input is absent
            InvalidSignatureError: HMAC mismatch
        """
        missing = [
            name
            for name, value in (
                ("razorpay_order_id", order_id),
                ("razorpay_payment_id", payment_id),
                ("razorpay_signature", signature),
                ("user_id", user_id),
            )
            if not value
        ]
        if courses is None:
            missing.append("courses")
        if missing:
            raise MissingFieldsError("Payment verification failed", fields=missing)

        if not razorpay_gateway.verify_signature(order_id, payment_id, signature):
            logger.warning("Signature mismatch for order %s", order_id)
            raise InvalidSignatureError(order_id)

        logger.info("Payment %s verified for order %s", payment_id, order_id)
        return await enrollment_service.enroll_students(db, courses, user_id)

    async def send_payment_success_email(
        self,
        db: AsyncSession,
        order_id: Optional[str],
        payment_id: Optional[str],
        amount: Optional[float],
        user_id: Optional[str],
    ) -> None:
        """
        Email the buyer a receipt. `amount` arrives in paise.

        Raises:
            MissingFieldsError: "Missing payment details"
            NotFoundError: "User not found"
            ExternalServiceError: the mail relay failed
        """
        if not order_id or not payment_id or not amount or not user_id:
            raise MissingFieldsError("Missing payment details")

        user = await db.get(User, parse_uuid(user_id, "user"))
        if user is None:
            raise NotFoundError("User", message="User not found")

        await mail_service.send(
            user.email,
            "Payment Received",
            payment_success_email(user.full_name, amount / 100, order_id, payment_id),
        )


payment_service = PaymentService()
