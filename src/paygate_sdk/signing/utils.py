"""
Utility functions for request signing

This module provides utility functions for the gateway HTTP signature scheme,
including body encoding, digest calculation, RFC 1123 date handling and URL
parsing.
"""

import base64
import hashlib
import json
import re
import time
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Optional
from urllib.parse import urlsplit

from ..exceptions import InvalidRequestError, SigningError, ErrorCodes


DIGEST_PREFIX = "SHA-256="

_SCHEME_AND_HOST = re.compile(r'^https?://[^/]+', re.IGNORECASE)
_SCHEME = re.compile(r'^[a-z][a-z0-9+.\-]*://', re.IGNORECASE)


def utc_now() -> datetime:
    """
    Current time as an aware UTC datetime.

    Returns:
        datetime: Current UTC time
    """
    return datetime.now(timezone.utc)


def format_rfc1123_date(moment: Optional[datetime] = None) -> str:
    """
    Format a moment as an RFC 1123 (IMF-fixdate) string.

    Naive datetimes are taken to be UTC.

    Args:
        moment: Datetime to format (uses current time if None)

    Returns:
        str: Date such as "Tue, 15 Nov 1994 08:12:31 GMT"
    """
    if moment is None:
        moment = utc_now()

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    else:
        moment = moment.astimezone(timezone.utc)

    return format_datetime(moment.replace(microsecond=0), usegmt=True)


def encode_body(body: Any) -> Optional[bytes]:
    """
    Encode a request body to the exact bytes that will be sent and digested.

    Args:
        body: None, bytes, str (UTF-8), or a dict/list serialized as compact JSON

    Returns:
        bytes or None

    Raises:
        InvalidRequestError: If the body type is not supported
    """
    if body is None:
        return None

    if isinstance(body, bytes):
        return body

    if isinstance(body, (bytearray, memoryview)):
        return bytes(body)

    if isinstance(body, str):
        return body.encode('utf-8')

    if isinstance(body, (dict, list)):
        try:
            return json.dumps(body, separators=(',', ':'), ensure_ascii=False).encode('utf-8')
        except (TypeError, ValueError) as e:
            raise InvalidRequestError(
                f"Request body is not JSON serializable: {e}",
                ErrorCodes.INVALID_BODY,
                {"body_type": type(body).__name__}
            )

    raise InvalidRequestError(
        f"Body must be bytes, str, dict, list or None, got {type(body).__name__}",
        ErrorCodes.INVALID_BODY,
        {"body_type": type(body).__name__}
    )


def calculate_digest(body: Optional[bytes]) -> Optional[str]:
    """
    Calculate the digest header value for a request body.

    Args:
        body: Encoded request body

    Returns:
        str: "SHA-256=<base64 sha256>", or None when the body is absent or empty

    Raises:
        SigningError: If the body is not bytes
    """
    if not body:
        return None

    if not isinstance(body, (bytes, bytearray)):
        raise SigningError(
            f"Digest input must be bytes, got {type(body).__name__}",
            ErrorCodes.SIGNING_FAILED,
            {"body_type": type(body).__name__}
        )

    digest_bytes = hashlib.sha256(body).digest()
    return DIGEST_PREFIX + base64.b64encode(digest_bytes).decode('ascii')


def extract_host(url: str) -> str:
    """
    Extract the host (with port) from a URL.

    Args:
        url: Absolute URL, or a bare "host/path" string

    Returns:
        str: Host portion, e.g. "api.example.com:8443"
    """
    parts = urlsplit(url)
    if parts.scheme and parts.netloc:
        # Drop any userinfo
        return parts.netloc.rsplit('@', 1)[-1]

    return _SCHEME.sub('', url).split('/')[0]


def extract_path(url: str) -> str:
    """
    Extract the request path, including query string, from a URL.

    Args:
        url: Absolute URL or already-relative path

    Returns:
        str: Path plus "?query"; fragments are dropped for absolute URLs
    """
    parts = urlsplit(url)
    if parts.scheme and parts.netloc:
        path = parts.path or '/'
        if parts.query:
            path = f"{path}?{parts.query}"
        return path

    return _SCHEME_AND_HOST.sub('', url) or '/'


class PerformanceTimer:
    """Simple performance timer for monitoring signing operations."""

    def __init__(self):
        self.start_time = time.perf_counter()

    def elapsed_ms(self) -> float:
        """Get elapsed time in milliseconds."""
        return (time.perf_counter() - self.start_time) * 1000
