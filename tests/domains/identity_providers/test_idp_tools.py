"""Tests for the setup_htpasswd_identity_provider tool."""

import base64
import json

import bcrypt
import pytest
from ocm_fakes import FakeOCM

from rosa_mcp.clients.ocm import OCMSession
from rosa_mcp.domains.clusters.client import CLUSTERS_PATH
from rosa_mcp.domains.identity_providers.htpasswd import HTPasswdError
from rosa_mcp.domains.identity_providers.tools import setup_htpasswd_identity_provider
from rosa_mcp.tools.arguments import ArgumentBag
from rosa_mcp.utils.errors import OCMError

CLUSTER_ID = "c1"
CLUSTER_PATH = f"{CLUSTERS_PATH}/{CLUSTER_ID}"
IDP_PATH = f"{CLUSTER_PATH}/identity_providers"
GOOD_PASSWORD = "Sup3rSecretPassw0rd"


@pytest.fixture
def cluster_api(fake_ocm: FakeOCM) -> FakeOCM:
    """Serve an existing cluster without identity providers."""
    fake_ocm.add("GET", CLUSTER_PATH, json={"id": CLUSTER_ID, "name": "alpha", "state": "ready"})
    fake_ocm.add("GET", IDP_PATH, json={"items": [], "total": 0})
    fake_ocm.add(
        "POST",
        IDP_PATH,
        status=201,
        json={
            "id": "idp-1",
            "name": "htpasswd",
            "type": "HTPasswdIdentityProvider",
            "mapping_method": "claim",
        },
    )
    return fake_ocm


def _posted_body(fake_ocm: FakeOCM) -> dict:
    posts = [r for r in fake_ocm.requests if r.method == "POST"]
    assert len(posts) == 1
    return json.loads(posts[0].content)


class TestSetupHtpasswdIdentityProvider:
    """Test identity provider creation."""

    def test_single_user(self, cluster_api: FakeOCM, ocm_session: OCMSession) -> None:
        text = setup_htpasswd_identity_provider(
            ocm_session,
            ArgumentBag({"cluster_id": CLUSTER_ID, "username": "alice", "password": GOOD_PASSWORD}),
        )

        assert "Identity provider 'htpasswd' created on cluster c1." in text
        assert "ID: idp-1" in text
        assert "Users: 1" in text

        body = _posted_body(cluster_api)
        assert body["type"] == "HTPasswdIdentityProvider"
        assert body["name"] == "htpasswd"
        assert body["mapping_method"] == "claim"

        [user] = body["htpasswd"]["users"]["items"]
        assert set(user) == {"username", "hashed_password"}
        assert user["username"] == "alice"
        assert user["hashed_password"].startswith("$2")
        assert bcrypt.checkpw(GOOD_PASSWORD.encode(), user["hashed_password"].encode())

    def test_plain_password_never_sent(
        self, cluster_api: FakeOCM, ocm_session: OCMSession
    ) -> None:
        setup_htpasswd_identity_provider(
            ocm_session,
            ArgumentBag({"cluster_id": CLUSTER_ID, "users": [f"alice:{GOOD_PASSWORD}"]}),
        )

        posts = [r for r in cluster_api.requests if r.method == "POST"]
        assert GOOD_PASSWORD.encode() not in posts[0].content

    def test_password_too_long_for_bcrypt(
        self, cluster_api: FakeOCM, ocm_session: OCMSession
    ) -> None:
        password = "Aa1" + "x" * 80

        with pytest.raises(HTPasswdError, match="failed to hash password for user 'alice'"):
            setup_htpasswd_identity_provider(
                ocm_session,
                ArgumentBag({"cluster_id": CLUSTER_ID, "username": "alice", "password": password}),
            )

        assert not [r for r in cluster_api.requests if r.method == "POST"]

    def test_users_array_with_options(
        self, cluster_api: FakeOCM, ocm_session: OCMSession
    ) -> None:
        setup_htpasswd_identity_provider(
            ocm_session,
            ArgumentBag(
                {
                    "cluster_id": CLUSTER_ID,
                    "name": "team-idp",
                    "mapping_method": "lookup",
                    "users": [f"alice:{GOOD_PASSWORD}", f"bob:{GOOD_PASSWORD}!"],
                }
            ),
        )

        body = _posted_body(cluster_api)
        assert body["name"] == "team-idp"
        assert body["mapping_method"] == "lookup"
        items = body["htpasswd"]["users"]["items"]
        assert [u["username"] for u in items] == ["alice", "bob"]
        assert all("password" not in u for u in items)

    def test_hashed_file(self, cluster_api: FakeOCM, ocm_session: OCMSession) -> None:
        content = base64.b64encode(b"alice:$2y$05$hashvalue\n").decode()

        setup_htpasswd_identity_provider(
            ocm_session,
            ArgumentBag({"cluster_id": CLUSTER_ID, "htpasswd_file_content": content}),
        )

        body = _posted_body(cluster_api)
        assert body["htpasswd"]["users"]["items"] == [
            {"username": "alice", "hashed_password": "$2y$05$hashvalue"}
        ]

    def test_weak_password_rejected(self, cluster_api: FakeOCM, ocm_session: OCMSession) -> None:
        with pytest.raises(HTPasswdError, match="invalid user credentials for 'alice'"):
            setup_htpasswd_identity_provider(
                ocm_session,
                ArgumentBag({"cluster_id": CLUSTER_ID, "username": "alice", "password": "weak"}),
            )

        assert not [r for r in cluster_api.requests if r.method == "POST"]

    def test_duplicate_name(self, cluster_api: FakeOCM, ocm_session: OCMSession) -> None:
        cluster_api.add("GET", IDP_PATH, json={"items": [{"id": "x", "name": "htpasswd"}]})

        with pytest.raises(HTPasswdError, match="already exists"):
            setup_htpasswd_identity_provider(
                ocm_session,
                ArgumentBag(
                    {"cluster_id": CLUSTER_ID, "username": "alice", "password": GOOD_PASSWORD}
                ),
            )

    def test_overwrite_existing_skips_duplicate_check(
        self, cluster_api: FakeOCM, ocm_session: OCMSession
    ) -> None:
        setup_htpasswd_identity_provider(
            ocm_session,
            ArgumentBag(
                {
                    "cluster_id": CLUSTER_ID,
                    "username": "alice",
                    "password": GOOD_PASSWORD,
                    "overwrite_existing": True,
                }
            ),
        )

        assert IDP_PATH not in [r.url.path for r in cluster_api.requests if r.method == "GET"]

    def test_unknown_cluster(self, fake_ocm: FakeOCM, ocm_session: OCMSession) -> None:
        with pytest.raises(OCMError) as exc_info:
            setup_htpasswd_identity_provider(
                ocm_session,
                ArgumentBag({"cluster_id": "nope", "username": "alice", "password": GOOD_PASSWORD}),
            )

        assert exc_info.value.ocm_code == "CLUSTERS-MGMT-404"

    def test_invalid_name(self, cluster_api: FakeOCM, ocm_session: OCMSession) -> None:
        with pytest.raises(HTPasswdError, match="Invalid identifier"):
            setup_htpasswd_identity_provider(
                ocm_session,
                ArgumentBag(
                    {
                        "cluster_id": CLUSTER_ID,
                        "name": "bad name",
                        "username": "alice",
                        "password": GOOD_PASSWORD,
                    }
                ),
            )
