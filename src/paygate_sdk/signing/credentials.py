"""
Merchant credentials used to sign gateway requests

The secret key is decoded from base64 exactly once, when the credentials are
built, and is excluded from repr() so it does not end up in logs or
tracebacks.
"""

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any, Dict

from ..exceptions import ConfigurationError, ErrorCodes
from ..security import get_secret_info, mask_api_key, mask_merchant_id

_HEADER_FORBIDDEN = ("\r", "\n")
_KEY_ID_FORBIDDEN = _HEADER_FORBIDDEN + ('"',)


@dataclass(frozen=True)
class Credentials:
    """
    Immutable signing credentials

    Attributes:
        principal_id: Merchant identifier sent in the principal-id header
        key_id: Public key identifier placed in the signature's keyid
        secret_key: Decoded shared secret used as the HMAC key
    """
    principal_id: str
    key_id: str
    secret_key: bytes = field(repr=False)

    def __post_init__(self):
        """Validate credentials"""
        for name in ("principal_id", "key_id"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ConfigurationError(
                    f"Credential '{name}' cannot be empty",
                    ErrorCodes.MISSING_CREDENTIAL,
                    {"field": name}
                )

            # Both go out as header values; key_id is also quoted in the signature
            forbidden = _KEY_ID_FORBIDDEN if name == "key_id" else _HEADER_FORBIDDEN
            if any(char in value for char in forbidden):
                raise ConfigurationError(
                    f"Credential '{name}' contains a forbidden character",
                    ErrorCodes.INVALID_CONFIG,
                    {"field": name, "forbidden": [repr(char) for char in forbidden]}
                )

        if not isinstance(self.secret_key, bytes):
            raise ConfigurationError(
                "Secret key must be bytes",
                ErrorCodes.INVALID_SECRET_KEY,
                {"field": "secret_key"}
            )

        if not self.secret_key:
            raise ConfigurationError(
                "Secret key cannot be empty",
                ErrorCodes.MISSING_CREDENTIAL,
                {"field": "secret_key"}
            )

    @classmethod
    def from_base64(cls, principal_id: str, key_id: str, secret_key_b64: str) -> 'Credentials':
        """
        Build credentials from a base64-encoded shared secret.

        Args:
            principal_id: Merchant identifier
            key_id: Key identifier
            secret_key_b64: Shared secret in standard base64

        Returns:
            Credentials: Validated credentials

        Raises:
            ConfigurationError: If any field is empty or the secret is not valid base64
        """
        return cls(principal_id, key_id, decode_secret_key(secret_key_b64))

    def describe(self) -> Dict[str, Any]:
        """Masked view of the credentials, safe for logging"""
        return {
            "principal_id": mask_merchant_id(self.principal_id),
            "key_id": mask_api_key(self.key_id),
            "secret_key": get_secret_info(self.secret_key),
        }


def decode_secret_key(secret_key_b64: str) -> bytes:
    """
    Decode a base64 shared secret.

    Raises:
        ConfigurationError: If the secret is empty or not valid base64
    """
    if isinstance(secret_key_b64, bytes):
        secret_key_b64 = secret_key_b64.decode('ascii', errors='replace')

    if not isinstance(secret_key_b64, str) or not secret_key_b64.strip():
        raise ConfigurationError(
            "Credential 'secret_key' cannot be empty",
            ErrorCodes.MISSING_CREDENTIAL,
            {"field": "secret_key"}
        )

    try:
        decoded = base64.b64decode(secret_key_b64.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        # The secret itself stays out of the message
        raise ConfigurationError(
            f"Secret key is not valid base64: {e}",
            ErrorCodes.INVALID_SECRET_KEY,
            {"secret_key": get_secret_info(secret_key_b64)}
        ) from None

    if not decoded:
        raise ConfigurationError(
            "Secret key decodes to zero bytes",
            ErrorCodes.INVALID_SECRET_KEY
        )

    return decoded
