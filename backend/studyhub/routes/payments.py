"""
StudyHub Backend - Payment Route Handlers
===========================================

What:  POST /api/v1/payment/capturePayment
       POST /api/v1/payment/verifyPayment
       POST /api/v1/payment/sendPaymentSuccessEmail
How:   Authenticate, hand the body to PaymentService, wrap the result in
       the standard envelope. Errors are formatted by the global handlers.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from studyhub.database import get_db_session
from studyhub.schemas.common import ApiResponse, ErrorResponse
from studyhub.schemas.payment import (
    CapturePaymentRequest,
    OrderResponse,
    PaymentSuccessEmailRequest,
    VerifyPaymentData,
    VerifyPaymentRequest,
)
from studyhub.security import CurrentUser, get_current_user
from studyhub.services.payment_service import payment_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/payment", tags=["Payment"])

_ERRORS: Dict[int, Dict[str, Any]] = {
    400: {"description": "Invalid request", "model": ErrorResponse},
    401: {"description": "Not signed in", "model": ErrorResponse},
    404: {"description": "Course or user not found", "model": ErrorResponse},
    500: {"description": "Gateway, mail or server error", "model": ErrorResponse},
}


@router.post(
    "/capturePayment",
    response_model=ApiResponse[OrderResponse],
    responses=_ERRORS,
    summary="Open a gateway order for the cart",
)
async def capture_payment(
    body: CapturePaymentRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[OrderResponse]:
    order = await payment_service.capture_payment(db, body.courses, user.id)
    return ApiResponse(data=OrderResponse.model_validate(order))


@router.post(
    "/verifyPayment",
    response_model=ApiResponse[VerifyPaymentData],
    responses=_ERRORS,
    summary="Verify the gateway signature and enroll the buyer",
)
async def verify_payment(
    body: VerifyPaymentRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[VerifyPaymentData]:
    results = await payment_service.verify_payment(
        db,
        order_id=body.razorpay_order_id,
        payment_id=body.razorpay_payment_id,
        signature=body.razorpay_signature,
        courses=body.courses,
        user_id=user.id,
    )
    return ApiResponse(
        message="Payment Verified",
        data=VerifyPaymentData(enrollments=results),
    )


@router.post(
    "/sendPaymentSuccessEmail",
    response_model=ApiResponse[None],
    responses=_ERRORS,
    summary="Email the buyer a payment receipt",
)
async def send_payment_success_email(
    body: PaymentSuccessEmailRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[None]:
    await payment_service.send_payment_success_email(
        db,
        order_id=body.order_id,
        payment_id=body.payment_id,
        amount=body.amount,
        user_id=user.id,
    )
    return ApiResponse(message="Payment Email Sent")
