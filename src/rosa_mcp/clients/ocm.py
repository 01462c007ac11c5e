"""OCM session factory.

An :class:`OCMSession` wraps one ``httpx.Client`` authenticated with a single
resolved credential. Sessions are opened per tool call and closed when the
call ends; nothing is pooled or cached between calls.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from rosa_mcp import __version__
from rosa_mcp.auth import Credential, CredentialKind
from rosa_mcp.config import DEFAULT_OCM_TOKEN_URL
from rosa_mcp.utils.errors import OCMError, SessionBuildError

if TYPE_CHECKING:
    from collections.abc import Generator
    from types import TracebackType

    from rosa_mcp.config import RosaMCPConfig

logger = logging.getLogger(__name__)

USER_AGENT = f"rosa-mcp/{__version__}"


def _error_from_response(response: httpx.Response) -> OCMError:
    try:
        body: Any = response.json()
    except ValueError:
        body = response.text
    return OCMError.from_response_body(body, response.status_code)


class OfflineTokenAuth(httpx.Auth):
    """Exchange an offline (refresh) token for an access token on first use.

    The exchange runs inside the client's auth flow, so constructing the
    session performs no network call. The access token is kept for the
    lifetime of the session only.
    """

    requires_response_body = True

    def __init__(self, offline_token: str, token_url: str, client_id: str) -> None:
        self._offline_token = offline_token
        self._token_url = token_url
        self._client_id = client_id
        self._access_token: str | None = None

    def _build_refresh_request(self) -> httpx.Request:
        return httpx.Request(
            "POST",
            self._token_url,
            data={
                "grant_type": "refresh_token",
                "client_id": self._client_id,
                "refresh_token": self._offline_token,
            },
            headers={"User-Agent": USER_AGENT},
        )

    def _update_tokens(self, response: httpx.Response) -> None:
        if response.status_code != httpx.codes.OK:
            raise _error_from_response(response)

        payload = response.json()
        access_token = payload.get("access_token")
        if not access_token:
            raise OCMError("invalid_token", "token endpoint returned no access token")

        self._access_token = access_token
        # SSO may rotate the refresh token; use the new one for later refreshes.
        self._offline_token = payload.get("refresh_token") or self._offline_token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if self._access_token is None:
            logger.debug("Exchanging offline token for an access token")
            token_response = yield self._build_refresh_request()
            self._update_tokens(token_response)

        request.headers["Authorization"] = f"Bearer {self._access_token}"
        yield request


class OCMSession:
    """Authenticated connection to the OCM API, owned by one tool call.

    Use as a context manager or call :meth:`close` explicitly; closing more
    than once is a no-op.
    """

    def __init__(self, client: httpx.Client, credential_kind: CredentialKind) -> None:
        self._client: httpx.Client | None = client
        self._credential_kind = credential_kind

    @property
    def credential_kind(self) -> CredentialKind:
        return self._credential_kind

    @property
    def is_closed(self) -> bool:
        return self._client is None

    @property
    def client(self) -> httpx.Client:
        """Get the underlying HTTP client.

        Raises:
            RuntimeError: If the session has been closed.
        """
        if self._client is None:
            raise RuntimeError("OCM session is closed")
        return self._client

    def close(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            client.close()
            logger.debug("Closed OCM session")

    def __enter__(self) -> OCMSession:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Send a request to OCM and return the decoded JSON body.

        Raises:
            OCMError: If OCM (or the token exchange) answers with an error.
        """
        response = self.client.request(method, path, params=params, json=json)
        if response.is_error:
            error = _error_from_response(response)
            logger.debug(f"{method} {path} failed with {response.status_code}: {error.ocm_code}")
            raise error
        if not response.content:
            return {}
        return response.json()

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, body: Any) -> Any:
        return self.request("POST", path, json=body)


def open_session(
    credential: Credential,
    base_url: str,
    client_id: str,
    *,
    token_url: str = DEFAULT_OCM_TOKEN_URL,
    transport: httpx.BaseTransport | None = None,
) -> OCMSession:
    """Build an OCM session authenticated with ``credential``.

    Only the client object is constructed here; the first network call
    happens when a handler issues a request.

    Args:
        credential: The resolved credential, the only authentication material used.
        base_url: OCM API base URL.
        client_id: OAuth client id for the offline token exchange.
        token_url: SSO token endpoint for the offline token exchange.
        transport: Optional httpx transport (used by tests).

    Raises:
        SessionBuildError: If the client cannot be constructed.
    """
    try:
        if not credential.value:
            raise ValueError("credential is empty")

        url = httpx.URL(base_url)
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError(f"invalid OCM base URL '{base_url}'")

        auth: httpx.Auth
        if credential.kind == CredentialKind.ACCESS:
            auth = _BearerAuth(credential.value)
        else:
            auth = OfflineTokenAuth(credential.value, token_url, client_id)

        client = httpx.Client(
            base_url=url,
            auth=auth,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            transport=transport,
        )
    except Exception as e:
        logger.error(f"Failed to build OCM session: {e}")
        raise SessionBuildError(f"failed to build OCM session: {e}") from e

    logger.debug(f"Opened OCM session for {base_url} using {credential.kind.value} token")
    return OCMSession(client, credential.kind)


def open_session_from_config(
    credential: Credential,
    config: RosaMCPConfig,
    transport: httpx.BaseTransport | None = None,
) -> OCMSession:
    """Build an OCM session using the server configuration."""
    return open_session(
        credential,
        config.ocm_base_url,
        config.ocm_client_id,
        token_url=config.ocm_token_url,
        transport=transport,
    )


class _BearerAuth(httpx.Auth):
    def __init__(self, token: str) -> None:
        self._token = token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self._token}"
        yield request
