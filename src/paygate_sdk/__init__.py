"""
Payment Gateway Python SDK
HTTP signature request signing for the payment gateway REST API
"""

import logging

from .version import __version__
from .exceptions import (
    PaymentGatewaySDKError,
    ConfigurationError,
    InvalidRequestError,
    SigningError,
    ErrorCodes,
)
from .security import (
    mask_sensitive,
    mask_api_key,
    mask_merchant_id,
    get_secret_info,
    sanitize_for_logging,
    safe_log,
)
from .signing import (
    # Core signing functionality
    HttpSignatureSigner,
    create_signer,
    sign_request,
    compute_signature,
    format_signature_header,
    # Credentials
    Credentials,
    # Canonical message
    build_canonical_message,
    build_signing_elements,
    # Types
    HttpMethod,
    SigningRequest,
    SigningElement,
    CanonicalMessage,
    SignedHeaders,
    # Utilities
    calculate_digest,
    encode_body,
    extract_host,
    extract_path,
    format_rfc1123_date,
)
from .config import (
    GatewayConfig,
    load_config_from_json,
    load_config_from_file,
    load_config_from_env,
)
# Loaded after config: the session is built from a GatewayConfig
from .signing.integration import (
    SigningSession,
    create_signing_session,
    sign_prepared_request,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    '__version__',
    # Exceptions
    'PaymentGatewaySDKError',
    'ConfigurationError',
    'InvalidRequestError',
    'SigningError',
    'ErrorCodes',
    # Security helpers
    'mask_sensitive',
    'mask_api_key',
    'mask_merchant_id',
    'get_secret_info',
    'sanitize_for_logging',
    'safe_log',
    # Request Signing - Core
    'HttpSignatureSigner',
    'create_signer',
    'sign_request',
    'compute_signature',
    'format_signature_header',
    'Credentials',
    'build_canonical_message',
    'build_signing_elements',
    # Request Signing - Types
    'HttpMethod',
    'SigningRequest',
    'SigningElement',
    'CanonicalMessage',
    'SignedHeaders',
    # Request Signing - Utilities
    'calculate_digest',
    'encode_body',
    'extract_host',
    'extract_path',
    'format_rfc1123_date',
    # Configuration
    'GatewayConfig',
    'load_config_from_json',
    'load_config_from_file',
    'load_config_from_env',
    # HTTP Integration
    'SigningSession',
    'create_signing_session',
    'sign_prepared_request',
]
