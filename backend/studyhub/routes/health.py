"""
StudyHub Backend - Health Check Route
=======================================

What:  GET /health for container probes and load balancers.
How:   The database is probed with SELECT 1. The payment gateway and image
       host are reported as configured/unconfigured only; calling them
       would spend API quota on every probe.

Status levels:
    healthy:   database reachable, both integrations configured
    degraded:  database reachable, an integration lacks credentials
    unhealthy: database unreachable
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text

from studyhub import __version__
from studyhub.database import engine
from studyhub.schemas.common import HealthResponse
from studyhub.services.image_uploader import image_uploader
from studyhub.services.razorpay_gateway import razorpay_gateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check() -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    gateway_status = (
        "configured" if razorpay_gateway.key_id and razorpay_gateway.key_secret else "unconfigured"
    )
    image_status = (
        "configured"
        if image_uploader.cloud_name and image_uploader.api_key and image_uploader.api_secret
        else "unconfigured"
    )
    if overall == "healthy" and "unconfigured" in (gateway_status, image_status):
        overall = "degraded"

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        payment_gateway=gateway_status,
        image_host=image_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
