"""
Shared fixtures for the signing SDK test suite
"""

import base64
from datetime import datetime, timezone

import pytest

from paygate_sdk import Credentials

SECRET = b"test-shared-secret"
SECRET_B64 = base64.b64encode(SECRET).decode("ascii")
MERCHANT_ID = "test_merchant_123"
KEY_ID = "test-api-key-uuid"
HOST = "apitest.example.com"

FIXED_MOMENT = datetime(1994, 11, 15, 8, 12, 31, tzinfo=timezone.utc)
FIXED_DATE = "Tue, 15 Nov 1994 08:12:31 GMT"


@pytest.fixture
def credentials():
    """Test credentials built from a base64 secret."""
    return Credentials.from_base64(MERCHANT_ID, KEY_ID, SECRET_B64)


@pytest.fixture
def fixed_clock():
    """Clock that always returns the same instant."""
    return lambda: FIXED_MOMENT
