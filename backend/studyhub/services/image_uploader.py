"""
StudyHub Backend - Image Host Adapter (Cloudinary)
====================================================

What:  Uploads avatar images to Cloudinary and returns the upload result
       (the caller stores `secure_url`).
How:   Signed upload to POST /v1_1/<cloud>/image/upload with httpx.
       Signature = SHA-1 of the sorted "key=value" params joined with "&",
       followed by the API secret.

Retries:
    Transport errors and 5xx answers are retried with tenacity (exponential
    backoff with jitter). Re-uploading the same bytes only creates another
    asset in the folder, which is harmless for avatars.
"""

import hashlib
import logging
import time
from typing import Any, Dict, Optional

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from studyhub.config import settings
from studyhub.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return isinstance(exc, httpx.TransportError)


def sign_params(params: Dict[str, Any], api_secret: str) -> str:
    """Cloudinary request signature over every non-empty param."""
    to_sign = "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if params[key] not in (None, "")
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryUploader:
    SERVICE = "Cloudinary"

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        api_url: str = "https://api.cloudinary.com/v1_1",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def upload_image(
        self,
        content: bytes,
        filename: str,
        folder: str,
        height: Optional[int] = None,
        width: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Upload one image and return Cloudinary's JSON (secure_url, public_id, ...).

        height/width become an incoming "limit" transformation, so large
        photos are scaled down on ingest and small ones are left alone.

        Raises:
            ExternalServiceError: not configured, rejected, or still failing
                after the configured retry attempts
        """
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise ExternalServiceError(self.SERVICE, message="Image host is not configured")

        params: Dict[str, Any] = {
            "folder": folder,
            "timestamp": int(time.time()),
        }
        dims = []
        if height:
            dims.append(f"h_{height}")
        if width:
            dims.append(f"w_{width}")
        if dims:
            params["transformation"] = ",".join(["c_limit", *dims])
        params["signature"] = sign_params(params, self.api_secret)
        params["api_key"] = self.api_key

        try:
            result = await self._post_with_retry(params, content, filename)
        except httpx.HTTPStatusError as e:
            logger.error("Cloudinary rejected upload: status=%d", e.response.status_code)
            raise ExternalServiceError(
                self.SERVICE,
                message="Image upload was rejected",
                context={"status_code": e.response.status_code},
            )
        except httpx.HTTPError as e:
            logger.error("Cloudinary unreachable: %s", str(e))
            raise ExternalServiceError(
                self.SERVICE,
                message="Image upload failed. Please try again later.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Uploaded image to Cloudinary: public_id=%s", result.get("public_id"))
        return result

    @retry(
        retry=retry_if_exception(_is_transient),
        stop=stop_after_attempt(settings.retry_max_attempts),
        wait=wait_exponential_jitter(
            initial=settings.retry_min_wait,
            max=settings.retry_max_wait,
            jitter=1,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _post_with_retry(
        self, params: Dict[str, Any], content: bytes, filename: str
    ) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                f"{self.api_url}/{self.cloud_name}/image/upload",
                data={k: str(v) for k, v in params.items()},
                files={"file": (filename, content)},
            )
            response.raise_for_status()
            return response.json()


image_uploader = CloudinaryUploader(
    cloud_name=settings.cloud_name,
    api_key=settings.api_key,
    api_secret=settings.api_secret,
    api_url=settings.cloudinary_api_url,
    timeout=settings.http_timeout,
)
