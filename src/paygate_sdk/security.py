"""
Helpers for keeping credentials out of logs

Every value that identifies or authenticates the merchant passes through
one of these maskers before it is logged or included in an error.
"""

import logging
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)

NOT_SET = "[NOT SET]"

DEFAULT_SENSITIVE_KEYS = (
    "apiKey",
    "api_key",
    "key_id",
    "secret",
    "sharedSecret",
    "shared_secret",
    "sharedSecretKey",
    "password",
    "token",
    "authorization",
    "signature",
    "cardNumber",
    "card_number",
    "cvv",
    "securityCode",
    "security_code",
)


def mask_sensitive(value: Optional[str], visible_start: int = 4, visible_end: int = 4) -> str:
    """
    Mask a sensitive string, keeping only its first and last characters.

    Args:
        value: Value to mask
        visible_start: Number of leading characters left visible
        visible_end: Number of trailing characters left visible

    Returns:
        str: Masked value, or "[NOT SET]" when the value is empty
    """
    if not value:
        return NOT_SET

    if len(value) <= visible_start + visible_end:
        return "*" * len(value)

    masked_length = len(value) - visible_start - visible_end
    end = value[len(value) - visible_end:] if visible_end else ""
    return f"{value[:visible_start]}{'*' * masked_length}{end}"


def mask_api_key(api_key: Optional[str]) -> str:
    """Mask an API key (key id) for logging."""
    return mask_sensitive(api_key, 4, 4)


def mask_merchant_id(merchant_id: Optional[str]) -> str:
    """Mask a merchant id, leaving the first 8 characters visible."""
    if not merchant_id:
        return NOT_SET
    if len(merchant_id) <= 8:
        return "*" * len(merchant_id)
    return merchant_id[:8] + "*" * (len(merchant_id) - 8)


def get_secret_info(secret: Optional[Any]) -> Dict[str, Any]:
    """
    Describe a secret without exposing it.

    Args:
        secret: Secret value (str or bytes)

    Returns:
        dict: {"length": int, "set": bool}
    """
    length = len(secret) if secret else 0
    return {"length": length, "set": length > 0}


def sanitize_for_logging(
    obj: Dict[str, Any],
    sensitive_keys: Iterable[str] = DEFAULT_SENSITIVE_KEYS
) -> Dict[str, Any]:
    """
    Return a copy of a dict with sensitive string fields masked.

    Keys match case-insensitively when a sensitive name is contained in them.
    Nested dicts are sanitized recursively.
    """
    lowered = [key.lower() for key in sensitive_keys]
    sanitized: Dict[str, Any] = {}

    for key, value in obj.items():
        lower_key = str(key).lower()
        is_sensitive = any(sk in lower_key for sk in lowered)

        if is_sensitive and isinstance(value, (str, bytes)):
            if isinstance(value, bytes):
                sanitized[key] = "*" * len(value)
            else:
                sanitized[key] = mask_sensitive(value)
        elif isinstance(value, dict):
            sanitized[key] = sanitize_for_logging(value, lowered)
        else:
            sanitized[key] = value

    return sanitized


def safe_log(message: str, data: Optional[Dict[str, Any]] = None, level: int = logging.INFO) -> None:
    """Log a message with sensitive fields of `data` masked."""
    if data:
        logger.log(level, f"{message} {sanitize_for_logging(data)}")
    else:
        logger.log(level, message)
