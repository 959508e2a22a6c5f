"""
StudyHub Backend - Payment Request/Response Schemas
=====================================================

Every request field is optional at the schema level. Presence and shape are
checked by PaymentService so a missing field produces the documented 400
message ("Please provide Course IDs", "Payment verification failed", ...)
instead of FastAPI's generic 422.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from studyhub.schemas.common import CamelModel


class CapturePaymentRequest(BaseModel):
    # Any: a non-list value must reach the service to be rejected there
    courses: Optional[Any] = Field(default=None, description="Course ids to purchase")


class VerifyPaymentRequest(BaseModel):
    """Payload the checkout widget hands back after a completed payment."""

    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None
    courses: Optional[List[Any]] = None


class PaymentSuccessEmailRequest(CamelModel):
    order_id: Optional[str] = None
    payment_id: Optional[str] = None
    # Minor units (paise), as received from the gateway
    amount: Optional[float] = None


class EnrollmentResult(CamelModel):
    """
    Outcome of enrolling one user into one course.

    enrolled: roster, progress record and course link are written
    notified: the enrollment email went out
    error:    why this course stopped short, if it did
    """

    course_id: str
    enrolled: bool = False
    notified: bool = False
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.enrolled and self.notified


class OrderResponse(BaseModel):
    """Gateway order as returned by the Orders API (passed through untouched)."""

    id: str
    amount: int
    currency: str
    receipt: Optional[str] = None
    status: Optional[str] = None
    # Razorpay sends [] instead of {} when an order has no notes
    notes: Optional[Any] = None

    model_config = {"extra": "allow"}


class VerifyPaymentData(CamelModel):
    enrollments: List[EnrollmentResult] = Field(default_factory=list)
