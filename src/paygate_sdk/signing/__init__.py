"""
Payment Gateway SDK - Request Signing Module

HTTP signature (HMAC-SHA256) implementation for authenticating outbound
calls to the payment gateway REST API.

The `requests` integration lives in `paygate_sdk.signing.integration` and is
re-exported from the top-level package.
"""

from .types import (
    HttpMethod,
    SigningRequest,
    SigningElement,
    CanonicalMessage,
    SignedHeaders,
    normalize_method,
    HOST_HEADER,
    DATE_HEADER,
    DIGEST_HEADER,
    SIGNATURE_HEADER,
    PRINCIPAL_ID_HEADER,
    CONTENT_TYPE_HEADER,
    SIGNATURE_ALGORITHM,
)

from .credentials import (
    Credentials,
    decode_secret_key,
)

from .canonical_message import (
    CanonicalMessageBuilder,
    build_canonical_message,
    build_signing_elements,
    build_signing_string,
)

from .http_signature_signer import (
    HttpSignatureSigner,
    compute_signature,
    format_signature_header,
    create_signer,
    sign_request,
)

from .utils import (
    DIGEST_PREFIX,
    calculate_digest,
    encode_body,
    extract_host,
    extract_path,
    format_rfc1123_date,
    utc_now,
)

# Public API exports
__all__ = [
    # Core signing functionality
    'HttpSignatureSigner',
    'create_signer',
    'sign_request',
    'compute_signature',
    'format_signature_header',
    # Credentials
    'Credentials',
    'decode_secret_key',
    # Canonical message
    'CanonicalMessageBuilder',
    'build_canonical_message',
    'build_signing_elements',
    'build_signing_string',
    # Types
    'HttpMethod',
    'SigningRequest',
    'SigningElement',
    'CanonicalMessage',
    'SignedHeaders',
    'normalize_method',
    'HOST_HEADER',
    'DATE_HEADER',
    'DIGEST_HEADER',
    'SIGNATURE_HEADER',
    'PRINCIPAL_ID_HEADER',
    'CONTENT_TYPE_HEADER',
    'SIGNATURE_ALGORITHM',
    # Utilities
    'DIGEST_PREFIX',
    'calculate_digest',
    'encode_body',
    'extract_host',
    'extract_path',
    'format_rfc1123_date',
    'utc_now',
]
