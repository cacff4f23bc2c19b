"""
DevFlow Backend — Outbound Fetch Handler
==========================================

What:  JSON-over-HTTP helper for calling a DevFlow API (ours or another
       instance) and getting back an ActionResponse.
Why:   Callers read one envelope shape whether the failure happened on the
       far side (non-2xx), on the wire (timeout), or in the payload.
How:   httpx.AsyncClient per call with a hard timeout
       (`settings.fetch_timeout_seconds`, 5 s by default). Nothing is
       retried.

Outcomes:
    2xx           → body parsed as ActionResponse
    non-2xx       → request_error envelope, status = upstream status
    timeout       → warning logged, request_error envelope with status 408
    anything else → handle_error() envelope
"""

import logging
from typing import Any, Dict, Optional

import httpx

from devflow.config import settings
from devflow.exceptions import RequestError
from devflow.schemas.common import ActionResponse
from devflow.services.guard import handle_error

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


async def fetch_handler(
    url: str,
    method: str = "GET",
    *,
    json: Any = None,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ActionResponse:
    """
    Send a request and return the response envelope.

    Args:
        url:       Absolute URL
        method:    HTTP method
        json:      Body, serialized as JSON
        params:    Query string parameters
        headers:   Merged over the JSON defaults (caller wins)
        timeout:   Seconds before the request is abandoned
        transport: httpx transport override (tests use MockTransport/ASGITransport)
    """
    timeout = timeout if timeout is not None else settings.fetch_timeout_seconds
    merged_headers = {**DEFAULT_HEADERS, **(headers or {})}

    try:
        async with httpx.AsyncClient(transport=transport, timeout=timeout) as client:
            response = await client.request(
                method, url, json=json, params=params, headers=merged_headers
            )

        if not response.is_success:
            raise RequestError(
                response.status_code,
                f"HTTP error! status: {response.status_code}",
                context={"url": url},
            )

        result = ActionResponse.model_validate(response.json())
        result.status = response.status_code
        return result

    except httpx.TimeoutException:
        logger.warning("Request to %s timed out.", url)
        return handle_error(RequestError(408, f"Request to {url} timed out"))
    except Exception as exc:
        return handle_error(exc)
