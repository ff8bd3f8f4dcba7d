"""
HTTP signature signer for the payment gateway

This module provides the signer that turns a request into the header set the
gateway validates: date, body digest, HMAC-SHA256 signature and the merchant
identifier. HMAC computation uses the `cryptography` package.
"""

import base64
import logging
from typing import Dict, List, Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac

from ..exceptions import ErrorCodes, SigningError
from ..security import mask_merchant_id
from .canonical_message import build_canonical_message
from .credentials import Credentials
from .types import (
    CanonicalMessage,
    Clock,
    HttpMethod,
    RequestBody,
    SignedHeaders,
    SigningRequest,
    HOST_HEADER,
    DATE_HEADER,
    DIGEST_HEADER,
    SIGNATURE_HEADER,
    PRINCIPAL_ID_HEADER,
    CONTENT_TYPE_HEADER,
    DEFAULT_CONTENT_TYPE,
    SIGNATURE_ALGORITHM,
)
from .utils import PerformanceTimer, format_rfc1123_date, utc_now

logger = logging.getLogger(__name__)

# Signing is expected to be well under a millisecond
SLOW_SIGNING_THRESHOLD_MS = 10


def compute_signature(secret_key: bytes, signing_string: str) -> str:
    """
    Compute the base64 HMAC-SHA256 of a signing string.

    Args:
        secret_key: Decoded shared secret
        signing_string: Canonical signing string

    Returns:
        str: Base64-encoded MAC

    Raises:
        SigningError: If the key is empty or the HMAC primitive fails
    """
    if not secret_key:
        raise SigningError("Secret key cannot be empty", ErrorCodes.SIGNING_FAILED)

    try:
        mac = hmac.HMAC(secret_key, hashes.SHA256())
        mac.update(signing_string.encode('utf-8'))
        return base64.b64encode(mac.finalize()).decode('ascii')
    except (UnsupportedAlgorithm, TypeError, ValueError) as e:
        raise SigningError(
            f"HMAC computation failed: {e}",
            ErrorCodes.SIGNING_FAILED,
            {"original_error": type(e).__name__}
        )


def format_signature_header(key_id: str, header_names: List[str], signature: str) -> str:
    """
    Format the signature header value.

    Returns:
        str: keyid="...", algorithm="HmacSHA256", headers="...", signature="..."
    """
    return (
        f'keyid="{key_id}", '
        f'algorithm="{SIGNATURE_ALGORITHM}", '
        f'headers="{" ".join(header_names)}", '
        f'signature="{signature}"'
    )


class HttpSignatureSigner:
    """
    Gateway HTTP signature signer

    Holds only immutable state, so one instance can be shared across threads.
    """

    def __init__(
        self,
        credentials: Credentials,
        clock: Optional[Clock] = None,
        content_type: Optional[str] = DEFAULT_CONTENT_TYPE
    ):
        """
        Initialize the signer.

        Args:
            credentials: Merchant credentials
            clock: Callable returning the current datetime (UTC now if None)
            content_type: Content type added to the header map, None to omit it

        Raises:
            SigningError: If the credentials carry no usable secret key
        """
        secret_key = getattr(credentials, "secret_key", None)
        if not isinstance(secret_key, bytes) or not secret_key:
            raise SigningError(
                "Credentials must carry a non-empty secret key",
                ErrorCodes.SIGNING_FAILED
            )

        self.credentials = credentials
        self.clock = clock or utc_now
        self.content_type = content_type

    def sign_request(self, request: SigningRequest) -> SignedHeaders:
        """
        Sign a request.

        Args:
            request: Validated request

        Returns:
            SignedHeaders: Headers to merge into the outgoing request

        Raises:
            SigningError: If signing fails
        """
        timer = PerformanceTimer()

        date = format_rfc1123_date(self.clock())
        canonical = build_canonical_message(request, date)
        signing_string = canonical.signing_string

        signature_value = compute_signature(self.credentials.secret_key, signing_string)
        signature = format_signature_header(
            self.credentials.key_id,
            canonical.header_names,
            signature_value
        )

        result = SignedHeaders(
            date=date,
            digest=canonical.digest,
            signature=signature,
            host=request.host,
            principal_id=self.credentials.principal_id,
            headers=self._build_headers(request, date, canonical, signature),
            signing_string=signing_string
        )

        elapsed_ms = timer.elapsed_ms()
        if elapsed_ms > SLOW_SIGNING_THRESHOLD_MS:
            logger.warning(f"Signing operation took {elapsed_ms:.2f}ms (target: <{SLOW_SIGNING_THRESHOLD_MS}ms)")

        logger.debug(
            f"Signed {request.method.value} {request.path} for merchant "
            f"{mask_merchant_id(self.credentials.principal_id)} (digest: {canonical.digest is not None})"
        )
        return result

    def sign(
        self,
        method: HttpMethod,
        path: str,
        host: str,
        body: RequestBody = None
    ) -> SignedHeaders:
        """
        Sign a request given as raw parts.

        Raises:
            InvalidRequestError: If method, path, host or body are malformed
            SigningError: If signing fails
        """
        return self.sign_request(SigningRequest(method=method, path=path, host=host, body=body))

    def _build_headers(
        self,
        request: SigningRequest,
        date: str,
        canonical: CanonicalMessage,
        signature: str
    ) -> Dict[str, str]:
        headers = {
            PRINCIPAL_ID_HEADER: self.credentials.principal_id,
            DATE_HEADER: date,
            HOST_HEADER: request.host,
        }

        if canonical.digest is not None:
            headers[DIGEST_HEADER] = canonical.digest

        headers[SIGNATURE_HEADER] = signature

        if self.content_type:
            headers[CONTENT_TYPE_HEADER] = self.content_type

        return headers


def create_signer(credentials: Credentials, clock: Optional[Clock] = None) -> HttpSignatureSigner:
    """
    Create a new signer.

    Args:
        credentials: Merchant credentials
        clock: Optional clock override

    Returns:
        HttpSignatureSigner: Configured signer instance
    """
    return HttpSignatureSigner(credentials, clock=clock)


def sign_request(
    credentials: Credentials,
    method: HttpMethod,
    path: str,
    host: str,
    body: RequestBody = None,
    clock: Optional[Clock] = None
) -> SignedHeaders:
    """
    Sign a single request with the given credentials.

    Returns:
        SignedHeaders: Signing result
    """
    return create_signer(credentials, clock).sign(method, path, host, body)
