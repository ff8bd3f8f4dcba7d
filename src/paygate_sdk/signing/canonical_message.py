"""
Canonical message construction for the gateway HTTP signature scheme

The signed elements are built once, as an ordered sequence of
(name, value) pairs. The signing string and the signature's `headers`
attribute are both read from that sequence.
"""

from datetime import datetime
from typing import List, Union

from .types import (
    CanonicalMessage,
    HttpMethod,
    RequestBody,
    SigningElement,
    SigningRequest,
    HOST_ELEMENT,
    DATE_ELEMENT,
    REQUEST_TARGET_ELEMENT,
    DIGEST_ELEMENT,
)
from .utils import calculate_digest, format_rfc1123_date


class CanonicalMessageBuilder:
    """
    Canonical message builder for gateway signatures
    """

    def __init__(self, request: SigningRequest, date: str):
        """
        Initialize canonical message builder.

        Args:
            request: Validated request to sign
            date: RFC 1123 date that will be sent with the request
        """
        self.request = request
        self.date = date

    def build(self) -> CanonicalMessage:
        """
        Build the ordered signing elements.

        Order is host, date, (request-target), then digest when the request
        has a non-empty body.

        Returns:
            CanonicalMessage: Elements plus the digest value, if any
        """
        elements = [
            SigningElement(HOST_ELEMENT, self.request.host),
            SigningElement(DATE_ELEMENT, self.date),
            SigningElement(REQUEST_TARGET_ELEMENT, self._request_target()),
        ]

        digest = calculate_digest(self.request.body)
        if digest is not None:
            elements.append(SigningElement(DIGEST_ELEMENT, digest))

        return CanonicalMessage(elements=elements, digest=digest)

    def _request_target(self) -> str:
        return f"{self.request.method.value.lower()} {self.request.path}"


def build_canonical_message(request: SigningRequest, date: Union[str, datetime]) -> CanonicalMessage:
    """
    Build canonical message for signing.

    Args:
        request: Request to sign
        date: RFC 1123 string, or a datetime to format

    Returns:
        CanonicalMessage: Ordered signing elements
    """
    if isinstance(date, datetime):
        date = format_rfc1123_date(date)

    return CanonicalMessageBuilder(request, date).build()


def build_signing_elements(
    method: Union[HttpMethod, str],
    path: str,
    host: str,
    date: Union[str, datetime],
    body: RequestBody = None
) -> List[SigningElement]:
    """
    Build the ordered signing elements from raw request parts.

    Raises:
        InvalidRequestError: If method, path, host or body are malformed
    """
    request = SigningRequest(method=method, path=path, host=host, body=body)
    return build_canonical_message(request, date).elements


def build_signing_string(elements: List[SigningElement]) -> str:
    """Join signing elements into the string that is HMAC-signed."""
    return CanonicalMessage(elements=list(elements)).signing_string
