"""
HTTP client integration for request signing

This module hands the signer's header map to `requests`. The signer never
touches the transport; this adapter encodes the body once, signs those exact
bytes, and merges the signed headers into the outgoing request.
"""

import logging
from typing import Any, Dict, Optional, Union

import requests
from requests.models import PreparedRequest
from requests.sessions import Session

from ..config import GatewayConfig
from ..exceptions import ErrorCodes, InvalidRequestError
from .http_signature_signer import HttpSignatureSigner
from .types import SignedHeaders, SigningRequest, normalize_method
from .utils import encode_body, extract_host, extract_path

logger = logging.getLogger(__name__)


class SigningSession:
    """
    HTTP session wrapper that signs every outgoing gateway request.

    Paths are resolved against the configured base URL. Signing errors are
    raised to the caller and the request is not sent.
    """

    def __init__(
        self,
        config: GatewayConfig,
        signer: Optional[HttpSignatureSigner] = None,
        session: Optional[Session] = None
    ):
        """
        Initialize signing session.

        Args:
            config: Gateway configuration
            signer: Optional signer (built from the config if None)
            session: Optional existing requests session to wrap
        """
        self.config = config
        self.signer = signer or config.create_signer()
        self.session = session or requests.Session()
        self.base_url = config.base_url.rstrip('/')
        self.host = extract_host(self.base_url)

        logger.info(f"Signing session initialized for {self.base_url}")

    def request(
        self,
        method: str,
        url: str,
        json: Any = None,
        data: Any = None,
        headers: Optional[Dict[str, str]] = None,
        params: Any = None,
        **kwargs
    ) -> requests.Response:
        """
        Sign and send a request.

        The request is prepared first, so the signed path includes the query
        string built from `params` and the session's default params. Redirects
        are not followed unless `allow_redirects=True` is passed, since the
        signed headers would be replayed to the redirect target.

        Args:
            method: HTTP method
            url: Absolute URL on the configured host, or a path relative to the base URL
            json: JSON-serializable body
            data: Raw body (bytes or str); ignored when json is given
            headers: Extra headers; signed headers take precedence
            params: Query parameters
            **kwargs: cookies, auth, hooks, timeout, allow_redirects, proxies,
                stream, verify, cert

        Returns:
            requests.Response: HTTP response

        Raises:
            InvalidRequestError: If the request cannot be signed or targets another host
            SigningError: If signing fails
        """
        http_method = normalize_method(method)
        body = encode_body(json if json is not None else data)

        prepared = self.session.prepare_request(requests.Request(
            method=http_method.value,
            url=self._resolve_url(url),
            headers=headers,
            data=body,
            params=params,
            cookies=kwargs.pop('cookies', None),
            auth=kwargs.pop('auth', None),
            hooks=kwargs.pop('hooks', None),
        ))

        target_host = extract_host(prepared.url)
        if target_host != self.host:
            raise InvalidRequestError(
                f"Request host {target_host!r} does not match configured host {self.host!r}",
                ErrorCodes.INVALID_HOST,
                {"host": target_host, "expected": self.host}
            )

        signed = _sign_prepared(prepared, self.signer)

        if self.config.debug:
            logger.debug(f"Signing string for {http_method.value} {prepared.path_url}:\n"
                         f"{signed.signing_string}")

        prepared.headers.update(signed.headers)

        settings = self.session.merge_environment_settings(
            prepared.url,
            kwargs.pop('proxies', None) or {},
            kwargs.pop('stream', None),
            kwargs.pop('verify', None),
            kwargs.pop('cert', None)
        )
        send_kwargs = {
            'timeout': kwargs.pop('timeout', self.config.timeout),
            'allow_redirects': kwargs.pop('allow_redirects', False),
        }
        send_kwargs.update(settings)

        if kwargs:
            raise TypeError(f"Unexpected request arguments: {', '.join(sorted(kwargs))}")

        return self.session.send(prepared, **send_kwargs)

    def get(self, url: str, **kwargs) -> requests.Response:
        """Make GET request."""
        return self.request('GET', url, **kwargs)

    def post(self, url: str, **kwargs) -> requests.Response:
        """Make POST request."""
        return self.request('POST', url, **kwargs)

    def put(self, url: str, **kwargs) -> requests.Response:
        """Make PUT request."""
        return self.request('PUT', url, **kwargs)

    def patch(self, url: str, **kwargs) -> requests.Response:
        """Make PATCH request."""
        return self.request('PATCH', url, **kwargs)

    def delete(self, url: str, **kwargs) -> requests.Response:
        """Make DELETE request."""
        return self.request('DELETE', url, **kwargs)

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, *args):
        """Context manager exit."""
        self.close()

    def _resolve_url(self, url: str) -> str:
        if url.startswith(('http://', 'https://')):
            return url
        if not url.startswith('/'):
            url = '/' + url
        return self.base_url + url


def create_signing_session(
    config: GatewayConfig,
    **session_kwargs
) -> SigningSession:
    """
    Create a new signing session.

    Args:
        config: Gateway configuration
        **session_kwargs: Attributes to set on the underlying requests.Session

    Returns:
        SigningSession: Configured signing session
    """
    session = requests.Session()

    for key, value in session_kwargs.items():
        if hasattr(session, key):
            setattr(session, key, value)

    return SigningSession(config, session=session)


def sign_prepared_request(
    prepared_request: PreparedRequest,
    signer: HttpSignatureSigner
) -> PreparedRequest:
    """
    Sign a prepared request in place.

    Args:
        prepared_request: Prepared request to sign
        signer: Signer to use

    Returns:
        PreparedRequest: The same request with signature headers added

    Raises:
        InvalidRequestError: If the request cannot be signed
        SigningError: If signing fails
    """
    signed = _sign_prepared(prepared_request, signer)
    prepared_request.headers.update(signed.headers)
    return prepared_request


def _sign_prepared(prepared_request: PreparedRequest, signer: HttpSignatureSigner) -> SignedHeaders:
    body: Union[bytes, str, None] = prepared_request.body
    if body is not None and not isinstance(body, (bytes, str)):
        raise InvalidRequestError(
            "Streamed request bodies cannot be digested before sending",
            ErrorCodes.INVALID_BODY,
            {"body_type": type(body).__name__}
        )

    signing_request = SigningRequest(
        method=prepared_request.method,
        path=extract_path(prepared_request.url),
        host=extract_host(prepared_request.url),
        body=body
    )
    return signer.sign_request(signing_request)
