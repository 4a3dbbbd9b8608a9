"""
Shared HTTP plumbing for master and volume requests.

Builds cluster URLs, checks response status codes against what each
endpoint promises, and maps failures onto the client error taxonomy while
logging each one exactly once where it is detected.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from ..errors import NotFound, RequestError

__all__ = ["base_url", "volume_url", "check_status", "transport_error", "format_kv"]

logger = logging.getLogger(__name__)

# Bytes of an error body kept for the log
_BODY_LOG_LIMIT = 512


def base_url(addr: str) -> str:
    """Turn host:port (or a full http(s) URL) into a base URL without trailing slash."""
    if addr.startswith("http://") or addr.startswith("https://"):
        return addr.rstrip("/")
    return f"http://{addr.rstrip('/')}"


def volume_url(replica: str, fid: str) -> str:
    """URL of a file id on a volume server."""
    return f"{base_url(replica)}/{quote(fid, safe=',')}"


def format_kv(kv: Dict[str, Any]) -> str:
    return " ".join(f"{k}={v!r}" for k, v in kv.items())


def check_status(
    response: httpx.Response,
    expected: int,
    kv: Dict[str, Any],
    *,
    not_found: bool = False,
) -> None:
    """
    Verify a streamed response has the expected status.
    
    On mismatch the body is drained (so the connection can be reused) and
    logged, then an error is raised. The caller still owns closing the
    response, normally by leaving its ``with client.stream(...)`` block.
    
    Args:
        response: Open streamed response
        expected: The one status code that means success
        kv: Log context, extended in place with status and body
        not_found: Map HTTP 404 to NotFound instead of RequestError
        
    Raises:
        NotFound: On 404 when ``not_found`` is set
        RequestError: On any other unexpected status
    """
    if response.status_code == expected:
        return
    
    try:
        body = response.read()
        kv["body"] = body[:_BODY_LOG_LIMIT]
    except httpx.HTTPError as e:
        kv["body_error"] = e
    kv["status"] = response.status_code
    
    # a not found status is only debug since it's somewhat expected
    if not_found and response.status_code == 404:
        logger.debug(f"seaweed status not found {format_kv(kv)}", extra={"seaweed": kv})
        raise NotFound(f"Not found: {kv.get('url')}")
    
    logger.warning(f"invalid seaweed status {format_kv(kv)}", extra={"seaweed": kv})
    raise RequestError(
        f"Unexpected seaweed status {response.status_code} from {kv.get('url')}",
        status_code=response.status_code,
        headers=response.headers,
    )


def transport_error(e: Exception, kv: Dict[str, Any], message: Optional[str] = None) -> RequestError:
    """Log a transport failure and build the RequestError to raise from it."""
    kv["error"] = e
    logger.warning(f"error making seaweed http request {format_kv(kv)}", extra={"seaweed": kv})
    return RequestError(message or f"Network error talking to seaweed at {kv.get('url')}: {e}")
