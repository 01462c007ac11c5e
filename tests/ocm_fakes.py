"""In-memory OCM API used by the tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx

OCM_URL = "https://api.openshift.com"
TOKEN_PATH = "/auth/realms/redhat-external/protocol/openid-connect/token"

Responder = Callable[[httpx.Request], httpx.Response]


class FakeOCM:
    """OCM API and SSO token endpoint served through ``httpx.MockTransport``.

    Routes are keyed by method and URL path. Unrouted requests get the
    404 error body OCM itself returns.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Responder] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        json: Any = None,
        status: int = 200,
        responder: Responder | None = None,
    ) -> None:
        if responder is None:

            def responder(_request: httpx.Request) -> httpx.Response:
                return httpx.Response(status, json=json)

        self.routes[(method, path)] = responder

    def add_error(self, method: str, path: str, status: int, code: str, reason: str) -> None:
        self.add(
            method,
            path,
            json={
                "kind": "Error",
                "id": str(status),
                "code": code,
                "reason": reason,
                "operation_id": "op-123",
            },
            status=status,
        )

    def add_token_exchange(self, access_token: str = "exchanged-access-token") -> None:
        self.add(
            "POST",
            TOKEN_PATH,
            json={"access_token": access_token, "token_type": "Bearer", "expires_in": 900},
        )

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get((request.method, request.url.path))
        if responder is None:
            return httpx.Response(
                404,
                json={
                    "kind": "Error",
                    "code": "CLUSTERS-MGMT-404",
                    "reason": f"Resource '{request.url.path}' not found",
                },
            )
        return responder(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def api_requests(self) -> list[httpx.Request]:
        """Requests sent to the OCM API, excluding token exchanges."""
        return [r for r in self.requests if r.url.path != TOKEN_PATH]
