"""
Test suite for the HTTP signature signer

Covers digest and HMAC computation, header assembly, the signature wire
format and the end-to-end signing scenarios.
"""

import base64
import hashlib
import hmac
import re
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from paygate_sdk import (
    HttpSignatureSigner,
    HttpMethod,
    InvalidRequestError,
    SigningError,
    SigningRequest,
    calculate_digest,
    compute_signature,
    format_signature_header,
    sign_request,
)
from paygate_sdk.signing import (
    DATE_HEADER,
    DIGEST_HEADER,
    HOST_HEADER,
    PRINCIPAL_ID_HEADER,
    SIGNATURE_HEADER,
    CONTENT_TYPE_HEADER,
)

from conftest import SECRET, MERCHANT_ID, KEY_ID, HOST, FIXED_DATE

SIGNATURE_PATTERN = re.compile(
    r'^keyid="(?P<keyid>[^"]*)", algorithm="(?P<algorithm>[^"]*)", '
    r'headers="(?P<headers>[^"]*)", signature="(?P<signature>[^"]*)"$'
)


def parse_signature(value):
    match = SIGNATURE_PATTERN.match(value)
    assert match, f"Unexpected signature format: {value}"
    return match.groupdict()


def reference_hmac(secret, signing_string):
    mac = hmac.new(secret, signing_string.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(mac).decode()


class TestDigest:
    """Test body digest calculation"""

    @pytest.mark.parametrize("body", [b"{}", b"x", b'{"test":"data"}', "José 🎉 你好".encode("utf-8")])
    def test_digest_format(self, body):
        """Digest is SHA-256= plus base64 of the raw hash"""
        expected = "SHA-256=" + base64.b64encode(hashlib.sha256(body).digest()).decode()
        assert calculate_digest(body) == expected

    def test_no_digest_for_empty_or_absent_body(self):
        """Empty buffer and None both skip the digest"""
        assert calculate_digest(b"") is None
        assert calculate_digest(None) is None

    def test_single_byte_change_changes_digest(self):
        """Flipping one byte produces a different digest"""
        body = bytearray(b'{"amount":"100.00"}')
        original = calculate_digest(bytes(body))
        body[10] ^= 0x01
        assert calculate_digest(bytes(body)) != original


class TestSignaturePrimitives:
    """Test HMAC and header formatting"""

    def test_compute_signature_matches_stdlib_hmac(self):
        """HMAC output matches an independent computation"""
        signing_string = "host: h\ndate: d\n(request-target): get /"
        assert compute_signature(SECRET, signing_string) == reference_hmac(SECRET, signing_string)

    def test_compute_signature_rejects_empty_key(self):
        """Empty key is a signing error"""
        with pytest.raises(SigningError):
            compute_signature(b"", "anything")

    def test_format_signature_header(self):
        """Wire format is comma-space separated and double-quoted"""
        value = format_signature_header("kid", ["host", "date"], "c2ln")
        assert value == 'keyid="kid", algorithm="HmacSHA256", headers="host date", signature="c2ln"'


class TestHttpSignatureSigner:
    """Test the signer"""

    def setup_method(self):
        """Set up test fixtures"""
        self.moment = datetime(1994, 11, 15, 8, 12, 31, tzinfo=timezone.utc)

    def make_signer(self, credentials, **kwargs):
        return HttpSignatureSigner(credentials, clock=lambda: self.moment, **kwargs)

    def test_post_end_to_end(self, credentials):
        """POST with body signs host, date, request-target and digest"""
        body = b'{"buyerInformation":{"email":"a@b.com"}}'
        signer = self.make_signer(credentials)

        result = signer.sign("POST", "/tms/v2/customers", HOST, body)
        headers = result.headers

        assert DIGEST_HEADER in headers
        assert headers[DIGEST_HEADER] == calculate_digest(body)

        parsed = parse_signature(headers[SIGNATURE_HEADER])
        assert parsed["keyid"] == KEY_ID
        assert parsed["algorithm"] == "HmacSHA256"
        assert parsed["headers"] == "host date (request-target) digest"

        expected_string = (
            f"host: {HOST}\n"
            f"date: {FIXED_DATE}\n"
            "(request-target): post /tms/v2/customers\n"
            f"digest: {calculate_digest(body)}"
        )
        assert result.signing_string == expected_string
        assert parsed["signature"] == reference_hmac(SECRET, expected_string)

    def test_get_end_to_end(self, credentials):
        """GET without body has no digest"""
        signer = self.make_signer(credentials)

        result = signer.sign(HttpMethod.GET, "/tms/v2/customers", HOST)

        assert DIGEST_HEADER not in result.headers
        assert result.digest is None
        parsed = parse_signature(result.headers[SIGNATURE_HEADER])
        assert parsed["headers"] == "host date (request-target)"
        assert parsed["signature"] == reference_hmac(SECRET, result.signing_string)

    def test_header_map(self, credentials):
        """Header map carries principal id, date, host, signature and content type"""
        result = self.make_signer(credentials).sign("PUT", "/tms/v2/customers/1", HOST, {"name": "x"})

        assert result.headers[PRINCIPAL_ID_HEADER] == MERCHANT_ID
        assert result.headers[DATE_HEADER] == FIXED_DATE
        assert result.headers[HOST_HEADER] == HOST
        assert result.headers[CONTENT_TYPE_HEADER] == "application/json"
        assert result.date == FIXED_DATE
        assert result.host == HOST
        assert result.principal_id == MERCHANT_ID
        assert result.to_dict() == result.headers
        assert result.to_dict() is not result.headers

    def test_content_type_can_be_omitted(self, credentials):
        """content_type=None leaves content-type to the caller"""
        result = self.make_signer(credentials, content_type=None).sign("GET", "/", HOST)
        assert CONTENT_TYPE_HEADER not in result.headers

    def test_signed_names_match_signing_string(self, credentials):
        """The headers attribute lists exactly the signed lines, in order"""
        signer = self.make_signer(credentials)

        for method, body in (("GET", None), ("POST", b"x"), ("POST", b""), ("PATCH", {"a": 1}), ("DELETE", None)):
            result = signer.sign(method, "/r", HOST, body)
            names = parse_signature(result.signature)["headers"].split(" ")
            line_names = [line.split(": ", 1)[0] for line in result.signing_string.split("\n")]
            assert names == line_names

    def test_deterministic_for_same_instant(self, credentials):
        """Same inputs at the same instant give the same signature"""
        signer = self.make_signer(credentials)

        first = signer.sign("POST", "/tms/v2/customers", HOST, b"{}")
        second = signer.sign("POST", "/tms/v2/customers", HOST, b"{}")

        assert first.headers == second.headers

    def test_date_stamped_fresh_each_call(self, credentials):
        """Clock is read on every call; digest is unaffected"""
        moments = iter([self.moment, self.moment + timedelta(seconds=1)])
        signer = HttpSignatureSigner(credentials, clock=lambda: next(moments))

        first = signer.sign("POST", "/tms/v2/customers", HOST, b'{"a":1}')
        second = signer.sign("POST", "/tms/v2/customers", HOST, b'{"a":1}')

        assert first.date != second.date
        assert first.digest == second.digest
        assert first.signature != second.signature

    def test_default_clock_uses_current_time(self, credentials):
        """Without a clock the date is close to now"""
        result = HttpSignatureSigner(credentials).sign("GET", "/", HOST)
        stamped = datetime.strptime(result.date, "%a, %d %b %Y %H:%M:%S GMT").replace(tzinfo=timezone.utc)

        assert abs((datetime.now(timezone.utc) - stamped).total_seconds()) < 5

    def test_body_change_changes_signature(self, credentials):
        """One byte of body changes digest and signature"""
        signer = self.make_signer(credentials)

        first = signer.sign("POST", "/p", HOST, b'{"amount":"100"}')
        second = signer.sign("POST", "/p", HOST, b'{"amount":"101"}')

        assert first.digest != second.digest
        assert first.signature != second.signature

    def test_different_paths_and_methods(self, credentials):
        """Request target is bound into the signature"""
        signer = self.make_signer(credentials)

        by_path = signer.sign("GET", "/tms/v2/customers", HOST).signature
        other_path = signer.sign("GET", "/tms/v2/instruments", HOST).signature
        other_method = signer.sign("DELETE", "/tms/v2/customers", HOST).signature

        assert len({by_path, other_path, other_method}) == 3

    def test_malformed_path_produces_no_headers(self, credentials):
        """Invalid request fails before any header is built"""
        signer = self.make_signer(credentials)

        with pytest.raises(InvalidRequestError):
            signer.sign("POST", "customers", HOST, b"{}")

    def test_sign_request_object(self, credentials):
        """sign_request accepts a SigningRequest"""
        request = SigningRequest(HttpMethod.GET, "/tms/v2/customers", HOST)
        result = self.make_signer(credentials).sign_request(request)

        assert result.host == HOST

    def test_rejects_credentials_without_secret(self):
        """A signer is never built around an empty secret"""
        broken = Mock(principal_id=MERCHANT_ID, key_id=KEY_ID, secret_key=b"")

        with pytest.raises(SigningError):
            HttpSignatureSigner(broken)

    def test_module_level_sign_request(self, credentials):
        """sign_request helper builds a one-off signer"""
        result = sign_request(credentials, "GET", "/tms/v2/customers", HOST, clock=lambda: self.moment)

        assert result.date == FIXED_DATE
        assert parse_signature(result.signature)["headers"] == "host date (request-target)"

    def test_secret_never_logged(self, credentials, caplog):
        """Debug logging does not leak the secret or the full merchant id"""
        with caplog.at_level("DEBUG", logger="paygate_sdk"):
            self.make_signer(credentials).sign("POST", "/p", HOST, b"{}")

        assert SECRET.decode() not in caplog.text
        assert MERCHANT_ID not in caplog.text
