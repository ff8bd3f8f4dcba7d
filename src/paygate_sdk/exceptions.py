"""
Exception classes for the Payment Gateway signing SDK
"""

from typing import Optional, Dict, Any


class ErrorCodes:
    """Standard error codes for programmatic handling"""

    # Configuration errors
    INVALID_CONFIG = "INVALID_CONFIG"
    MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
    INVALID_SECRET_KEY = "INVALID_SECRET_KEY"
    CONFIG_PARSE_ERROR = "CONFIG_PARSE_ERROR"
    CONFIG_FILE_ERROR = "CONFIG_FILE_ERROR"

    # Request errors
    INVALID_METHOD = "INVALID_METHOD"
    INVALID_PATH = "INVALID_PATH"
    INVALID_HOST = "INVALID_HOST"
    INVALID_BODY = "INVALID_BODY"

    # Signing errors
    SIGNING_FAILED = "SIGNING_FAILED"


class PaymentGatewaySDKError(Exception):
    """Base exception for all SDK errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.error_code}, details: {self.details})"
        return f"{self.message} (code: {self.error_code})"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message='{self.message}', "
            f"error_code='{self.error_code}', details={self.details})"
        )


class ConfigurationError(PaymentGatewaySDKError):
    """Raised when credentials or configuration are missing or invalid"""

    def __init__(self, message: str, error_code: str = ErrorCodes.INVALID_CONFIG,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class InvalidRequestError(PaymentGatewaySDKError):
    """Raised when a request handed to the signer is malformed"""

    def __init__(self, message: str, error_code: str = ErrorCodes.INVALID_PATH,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class SigningError(PaymentGatewaySDKError):
    """Raised when digest or signature computation fails"""

    def __init__(self, message: str, error_code: str = ErrorCodes.SIGNING_FAILED,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
