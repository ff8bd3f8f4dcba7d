"""
Type definitions for request signing functionality

This module provides type definitions and data classes for the HTTP signature
scheme used to authenticate calls to the payment gateway REST API.
"""

from datetime import datetime
from typing import Callable, Dict, List, NamedTuple, Optional, Union, Any
from dataclasses import dataclass, field
from enum import Enum

from ..exceptions import InvalidRequestError, ErrorCodes
from .utils import encode_body


# Wire names fixed by the gateway's contract
HOST_HEADER = "host"
DATE_HEADER = "v-c-date"
DIGEST_HEADER = "digest"
SIGNATURE_HEADER = "signature"
PRINCIPAL_ID_HEADER = "v-c-merchant-id"
CONTENT_TYPE_HEADER = "content-type"

# Element names as they appear in the signing string
HOST_ELEMENT = "host"
DATE_ELEMENT = "date"
REQUEST_TARGET_ELEMENT = "(request-target)"
DIGEST_ELEMENT = "digest"

SIGNATURE_ALGORITHM = "HmacSHA256"
DEFAULT_CONTENT_TYPE = "application/json"


class HttpMethod(str, Enum):
    """HTTP methods supported for signing"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class SigningElement(NamedTuple):
    """One `name: value` line of the signing string"""
    name: str
    value: str

    def to_line(self) -> str:
        return f"{self.name}: {self.value}"


@dataclass
class SigningRequest:
    """
    Request to be signed

    Attributes:
        method: HTTP method (accepts HttpMethod or a case-insensitive string)
        path: Request path including any query string; must start with "/"
        host: Target host, with port when non-default
        body: Optional request body; str, dict and list bodies are encoded to bytes
    """
    method: HttpMethod
    path: str
    host: str
    body: Optional[bytes] = None

    def __post_init__(self):
        """Validate and normalize request after initialization"""
        self.method = normalize_method(self.method)

        if not isinstance(self.path, str) or not self.path.startswith("/"):
            raise InvalidRequestError(
                f"Request path must start with '/': {self.path!r}",
                ErrorCodes.INVALID_PATH,
                {"path": self.path}
            )

        if not isinstance(self.host, str) or not self.host.strip():
            raise InvalidRequestError(
                "Request host cannot be empty",
                ErrorCodes.INVALID_HOST,
                {"host": self.host}
            )

        for name, value in (("path", self.path), ("host", self.host)):
            if "\r" in value or "\n" in value:
                raise InvalidRequestError(
                    f"Request {name} must not contain line breaks",
                    ErrorCodes.INVALID_PATH if name == "path" else ErrorCodes.INVALID_HOST,
                    {name: value}
                )

        self.body = encode_body(self.body)

    @property
    def has_body(self) -> bool:
        """True when the body carries at least one byte"""
        return bool(self.body)


@dataclass
class CanonicalMessage:
    """
    Ordered signing elements for one request

    Attributes:
        elements: Signed elements in signing order
        digest: Digest header value, or None when the request has no body
    """
    elements: List[SigningElement]
    digest: Optional[str] = None

    @property
    def signing_string(self) -> str:
        """Newline-joined `name: value` lines, no trailing newline"""
        return "\n".join(element.to_line() for element in self.elements)

    @property
    def header_names(self) -> List[str]:
        """Element names in signing order"""
        return [element.name for element in self.elements]


@dataclass
class SignedHeaders:
    """
    Signing result

    Attributes:
        date: RFC 1123 date that was signed
        digest: Digest header value, None without a body
        signature: Complete signature header value
        host: Host that was signed
        principal_id: Merchant identifier sent alongside the signature
        headers: Wire header map to merge into the outgoing request
        signing_string: Exact text that was HMAC-signed
    """
    date: str
    digest: Optional[str]
    signature: str
    host: str
    principal_id: str
    headers: Dict[str, str] = field(default_factory=dict)
    signing_string: str = ""

    def __post_init__(self):
        """Validate signing result"""
        if not self.signature:
            raise ValueError("Signature cannot be empty")

        if not isinstance(self.headers, dict):
            raise ValueError("Headers must be a dictionary")

    def to_dict(self) -> Dict[str, str]:
        """Copy of the wire header map"""
        return dict(self.headers)


def normalize_method(method: Union[HttpMethod, str]) -> HttpMethod:
    """
    Coerce a method to HttpMethod.

    Raises:
        InvalidRequestError: If the method is not a recognized verb
    """
    if isinstance(method, HttpMethod):
        return method

    if isinstance(method, str):
        try:
            return HttpMethod(method.strip().upper())
        except ValueError:
            pass

    raise InvalidRequestError(
        f"Unsupported HTTP method: {method!r}",
        ErrorCodes.INVALID_METHOD,
        {"method": method, "supported": [m.value for m in HttpMethod]}
    )


# Type aliases for convenience
Clock = Callable[[], datetime]
HeaderDict = Dict[str, str]
RequestBody = Union[bytes, str, Dict[str, Any], List[Any], None]
