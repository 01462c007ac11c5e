"""ROSA cluster client operations."""

import logging
from typing import TYPE_CHECKING

from rosa_mcp.domains.clusters.models import Cluster, ClusterCreate
from rosa_mcp.utils.api import search_by_state

if TYPE_CHECKING:
    from rosa_mcp.clients.ocm import OCMSession

logger = logging.getLogger(__name__)

CLUSTERS_PATH = "/api/clusters_mgmt/v1/clusters"

# OCM caps page sizes; a size of -1 is rejected on this endpoint.
PAGE_SIZE = 100


class ClusterClient:
    """Client for clusters_mgmt cluster operations."""

    def __init__(self, session: "OCMSession") -> None:
        self._session = session

    def list_clusters(self, state: str) -> list[Cluster]:
        """List clusters in the given state.

        Args:
            state: Cluster state to filter by, e.g. "ready".

        Returns:
            All matching clusters, across pages.

        Raises:
            OCMError: If OCM rejects the request.
        """
        clusters: list[Cluster] = []
        page = 1
        while True:
            response = self._session.get(
                CLUSTERS_PATH,
                params={"search": search_by_state(state), "page": page, "size": PAGE_SIZE},
            )
            items = response.get("items") or []
            clusters.extend(Cluster.from_api(item) for item in items)

            total = response.get("total", len(clusters))
            if not items or len(clusters) >= total:
                break
            page += 1

        logger.debug(f"Found {len(clusters)} clusters in state '{state}'")
        return clusters

    def get_cluster(self, cluster_id: str) -> Cluster:
        """Get one cluster by ID.

        Raises:
            OCMError: If the cluster does not exist or is not accessible.
        """
        return Cluster.from_api(self._session.get(f"{CLUSTERS_PATH}/{cluster_id}"))

    def create_cluster(self, request: ClusterCreate) -> Cluster:
        """Create a ROSA HCP cluster.

        Raises:
            OCMError: If OCM rejects the cluster definition.
        """
        logger.info(f"Creating ROSA HCP cluster '{request.name}' in {request.region}")
        return Cluster.from_api(self._session.post(CLUSTERS_PATH, request.to_api()))
