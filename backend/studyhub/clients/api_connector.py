"""
StudyHub API Connector
========================

What:  The async HTTP client scripts, workers and integration tests use to
       call the StudyHub API.
How:   One httpx.AsyncClient configured with
           - base_url from STUDYHUB_BASE_URL (settings.api_base_url)
           - a cookie jar, so the auth `token` cookie set at login rides
             along on later calls
           - Content-Type: application/json unless a call overrides it
       plus `api_connector()`, a thin request function over it.

There is no retry and no response interception: a non-2xx answer raises
httpx.HTTPStatusError with the response attached, exactly once.

Example:
    async with create_api_client() as client:
        response = await api_connector(
            "POST", "/payment/capturePayment", {"courses": [course_id]}, client=client
        )
        order = response.json()["data"]
"""

import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from studyhub.config import settings

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {"Content-Type": "application/json"}

_default_client: Optional[httpx.AsyncClient] = None


def create_api_client(
    base_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Build a configured client. The caller owns it and must close it."""
    return httpx.AsyncClient(
        base_url=base_url or settings.api_base_url,
        headers=DEFAULT_HEADERS,
        cookies=httpx.Cookies(),
        timeout=settings.http_timeout,
        transport=transport,
    )


def get_default_client() -> httpx.AsyncClient:
    """Process-wide client, created on first use."""
    global _default_client
    if _default_client is None or _default_client.is_closed:
        _default_client = create_api_client()
    return _default_client


async def close_default_client() -> None:
    global _default_client
    if _default_client is not None:
        await _default_client.aclose()
        _default_client = None


async def api_connector(
    method: str,
    url: str,
    body: Optional[Any] = None,
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Dict[str, Any]] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> httpx.Response:
    """
    Send one request and return the response.

    Args:
        method: HTTP verb, any case
        url: Path relative to the client's base URL (or an absolute URL)
        body: JSON-serializable payload; None sends no body
        headers: Per-call headers, merged over the client defaults
        params: Query string parameters
        client: Client to use; defaults to the process-wide one

    Raises:
        httpx.HTTPStatusError: the server answered 4xx/5xx
        httpx.TransportError: the server could not be reached
    """
    client = client or get_default_client()
    response = await client.request(
        method.upper(),
        url,
        json=body,
        headers=dict(headers or {}),
        params=params,
    )
    logger.debug("%s %s -> %d", method.upper(), response.request.url, response.status_code)
    response.raise_for_status()
    return response
