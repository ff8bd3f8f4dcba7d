"""
Gateway configuration management

Loads merchant credentials and connection settings from dicts, JSON
strings, JSON files, or environment variables, and turns them into
validated signing credentials.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..exceptions import ConfigurationError, ErrorCodes
from ..security import get_secret_info, mask_api_key, mask_merchant_id
from ..signing.credentials import Credentials
from ..signing.http_signature_signer import HttpSignatureSigner
from ..signing.types import Clock
from ..signing.utils import extract_host

logger = logging.getLogger(__name__)

SANDBOX_BASE_URL = "https://apitest.cybersource.com"
PRODUCTION_BASE_URL = "https://api.cybersource.com"
DEFAULT_TIMEOUT_SECONDS = 30.0
ENV_PREFIX = "PAYGATE_"

_REQUIRED_FIELDS = ("merchant_id", "api_key", "shared_secret_key")

# camelCase aliases accepted in JSON documents
_FIELD_ALIASES = {
    "merchantId": "merchant_id",
    "apiKey": "api_key",
    "sharedSecretKey": "shared_secret_key",
    "basePath": "base_path",
}


@dataclass(frozen=True)
class GatewayConfig:
    """
    Gateway connection and credential settings

    Attributes:
        merchant_id: Merchant identifier
        api_key: Key identifier for the shared secret
        shared_secret_key: Base64-encoded shared secret
        base_path: Override for the API base URL
        timeout: Request timeout in seconds
        sandbox: Use the sandbox environment
        debug: Log signing strings at DEBUG level
    """
    merchant_id: str
    api_key: str
    shared_secret_key: str
    base_path: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    sandbox: bool = True
    debug: bool = False

    def __repr__(self) -> str:
        return f"GatewayConfig({self.describe()})"

    def __post_init__(self):
        """Validate configuration"""
        missing = [name for name in _REQUIRED_FIELDS if not getattr(self, name)]
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}",
                ErrorCodes.MISSING_CREDENTIAL,
                {"missing": missing}
            )

        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)) or self.timeout <= 0:
            raise ConfigurationError(
                "Timeout must be a positive number of seconds",
                ErrorCodes.INVALID_CONFIG,
                {"timeout": self.timeout}
            )

    @property
    def base_url(self) -> str:
        """API base URL for the selected environment"""
        if self.base_path:
            return self.base_path
        return SANDBOX_BASE_URL if self.sandbox else PRODUCTION_BASE_URL

    @property
    def host(self) -> str:
        """Host signed into every request"""
        return extract_host(self.base_url)

    def to_credentials(self) -> Credentials:
        """
        Decode the shared secret into signing credentials.

        Raises:
            ConfigurationError: If the secret is not valid base64
        """
        return Credentials.from_base64(self.merchant_id, self.api_key, self.shared_secret_key)

    def create_signer(self, clock: Optional[Clock] = None) -> HttpSignatureSigner:
        """Build a signer for these credentials."""
        signer = HttpSignatureSigner(self.to_credentials(), clock=clock)
        logger.info(f"Authentication configured for merchant: {mask_merchant_id(self.merchant_id)}")
        return signer

    def describe(self) -> Dict[str, Any]:
        """Masked view of the configuration, safe for logging"""
        return {
            "merchant_id": mask_merchant_id(self.merchant_id),
            "api_key": mask_api_key(self.api_key),
            "shared_secret_key": get_secret_info(self.shared_secret_key),
            "base_url": self.base_url,
            "timeout": self.timeout,
            "sandbox": self.sandbox,
            "debug": self.debug,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'GatewayConfig':
        """
        Build configuration from a mapping.

        Both snake_case and camelCase keys are accepted. A `timeout_ms`
        key is converted to seconds.
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                "Configuration must be a mapping",
                ErrorCodes.INVALID_CONFIG,
                {"type": type(data).__name__}
            )

        values: Dict[str, Any] = {}
        for key, value in data.items():
            values[_FIELD_ALIASES.get(key, key)] = value

        if "timeout_ms" in values:
            timeout_ms = values.pop("timeout_ms")
            try:
                values.setdefault("timeout", float(timeout_ms) / 1000.0)
            except (TypeError, ValueError):
                raise ConfigurationError(
                    f"Invalid timeout_ms: {timeout_ms!r}",
                    ErrorCodes.INVALID_CONFIG
                )

        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(values) - known)
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")

        return cls(**{k: v for k, v in values.items() if k in known})

    @classmethod
    def from_json(cls, json_string: str) -> 'GatewayConfig':
        """Load configuration from a JSON string"""
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Failed to parse configuration JSON: {e}", ErrorCodes.CONFIG_PARSE_ERROR)
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'GatewayConfig':
        """Load configuration from a JSON file"""
        try:
            path = Path(file_path)
            with open(path, 'r', encoding='utf-8') as f:
                json_string = f.read()
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file: {e}", ErrorCodes.CONFIG_FILE_ERROR)
        return cls.from_json(json_string)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, prefix: str = ENV_PREFIX) -> 'GatewayConfig':
        """
        Load configuration from environment variables.

        Reads <prefix>MERCHANT_ID, <prefix>API_KEY, <prefix>SHARED_SECRET_KEY,
        and optionally <prefix>BASE_PATH, <prefix>TIMEOUT, <prefix>SANDBOX,
        <prefix>DEBUG.
        """
        env = os.environ if environ is None else environ

        values: Dict[str, Any] = {}
        for name in ("merchant_id", "api_key", "shared_secret_key", "base_path"):
            value = env.get(prefix + name.upper())
            if value:
                values[name] = value

        timeout = env.get(prefix + "TIMEOUT")
        if timeout:
            try:
                values["timeout"] = float(timeout)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid {prefix}TIMEOUT: {timeout!r}",
                    ErrorCodes.INVALID_CONFIG
                )

        for name in ("sandbox", "debug"):
            value = env.get(prefix + name.upper())
            if value is not None and value != "":
                values[name] = _parse_bool(prefix + name.upper(), value)

        for name in _REQUIRED_FIELDS:
            values.setdefault(name, "")

        return cls(**values)


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"Invalid boolean for {name}: {value!r}", ErrorCodes.INVALID_CONFIG)


def load_config_from_json(json_string: str) -> GatewayConfig:
    """Load gateway configuration from JSON string"""
    return GatewayConfig.from_json(json_string)


def load_config_from_file(file_path: Union[str, Path]) -> GatewayConfig:
    """Load gateway configuration from file"""
    return GatewayConfig.from_file(file_path)


def load_config_from_env(environ: Optional[Mapping[str, str]] = None) -> GatewayConfig:
    """Load gateway configuration from environment variables"""
    return GatewayConfig.from_env(environ)
