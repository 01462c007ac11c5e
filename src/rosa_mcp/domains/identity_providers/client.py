"""Cluster identity provider client operations."""

import logging
from typing import TYPE_CHECKING

from rosa_mcp.domains.clusters.client import CLUSTERS_PATH, ClusterClient
from rosa_mcp.domains.identity_providers.htpasswd import (
    HTPasswdError,
    hash_password,
    validate_idp_name,
    validate_user_credentials,
    validate_username,
)
from rosa_mcp.domains.identity_providers.models import HTPasswdUser, IdentityProvider

if TYPE_CHECKING:
    from rosa_mcp.clients.ocm import OCMSession

logger = logging.getLogger(__name__)


class IdentityProviderClient:
    """Client for clusters_mgmt identity provider operations."""

    def __init__(self, session: "OCMSession") -> None:
        self._session = session

    def _path(self, cluster_id: str) -> str:
        return f"{CLUSTERS_PATH}/{cluster_id}/identity_providers"

    def list_identity_providers(self, cluster_id: str) -> list[IdentityProvider]:
        response = self._session.get(self._path(cluster_id))
        return [IdentityProvider.from_api(item) for item in response.get("items") or []]

    def create_identity_provider(self, cluster_id: str, idp: IdentityProvider) -> IdentityProvider:
        return IdentityProvider.from_api(self._session.post(self._path(cluster_id), idp.to_api()))

    def setup_htpasswd_identity_provider(
        self,
        cluster_id: str,
        name: str,
        mapping_method: str,
        users: dict[str, str],
        hashed: bool = False,
        overwrite_existing: bool = False,
    ) -> IdentityProvider:
        """Create an htpasswd identity provider on a cluster.

        Args:
            cluster_id: Target cluster.
            name: Identity provider name.
            mapping_method: Identity mapping method, e.g. "claim".
            users: Username to password (plain or hashed).
            hashed: Whether the passwords are already hashed. Plain passwords
                are bcrypt-hashed before they leave the process.
            overwrite_existing: Skip the duplicate-name check.

        Returns:
            The created identity provider.

        Raises:
            OCMError: If the cluster is not accessible or OCM rejects the request.
            HTPasswdError: If the name or a user fails validation.
        """
        # Fails fast with the OCM error when the cluster is not accessible.
        ClusterClient(self._session).get_cluster(cluster_id)

        validate_idp_name(name)

        if not overwrite_existing:
            for existing in self.list_identity_providers(cluster_id):
                if existing.name == name:
                    raise HTPasswdError(f"identity provider with name '{name}' already exists")

        entries: list[HTPasswdUser] = []
        for username, password in users.items():
            try:
                if hashed:
                    validate_username(username)
                else:
                    validate_user_credentials(username, password)
            except HTPasswdError as e:
                raise HTPasswdError(f"invalid user credentials for '{username}': {e}") from e

            hashed_password = password
            if not hashed:
                try:
                    hashed_password = hash_password(password)
                except HTPasswdError as e:
                    raise HTPasswdError(f"failed to hash password for user '{username}': {e}") from e
            entries.append(HTPasswdUser(username=username, hashed_password=hashed_password))

        idp = IdentityProvider(
            name=name,
            type="HTPasswdIdentityProvider",
            mapping_method=mapping_method,
            users=entries,
        )
        logger.info(f"Creating htpasswd identity provider '{name}' with {len(entries)} users on {cluster_id}")
        return self.create_identity_provider(cluster_id, idp)
