# /reimbursement_pipeline/defs/resources.py
"""
Dagster Resources for subgraph connections and configuration
"""
import os
from datetime import datetime, timezone
from typing import Optional

import dagster as dg
from dagster import ConfigurableResource

from reimbursement_pipeline.services.subgraph_client import SubgraphClient


class SubgraphResource(ConfigurableResource):
    """GraphQL endpoint of one subgraph (block index or staking registry)"""

    endpoint: str
    api_key: Optional[str] = None
    timeout_seconds: float = 30.0

    def get_client(self, logger=None) -> SubgraphClient:
        """New async client; close it with `async with` or `aclose()`"""
        return SubgraphClient(
            endpoint=self.endpoint,
            api_key=self.api_key,
            timeout_seconds=self.timeout_seconds,
            logger=logger,
        )


class ReimbursementConfigResource(ConfigurableResource):
    """Configuration resource for reimbursement runs"""

    # Slashing event window (Unix seconds, inclusive)
    start_timestamp: int = 1709733209
    end_timestamp: Optional[int] = None  # None = now

    # Events below this amount (wei) are ignored
    min_amount_wei: int = 0

    # Subgraph page size
    page_size: int = 1000

    # Allowed |sum(reimbursements) - slashed| in wei
    tolerance_wei: int = 10000

    # Delegation export
    export_block: Optional[int] = None  # None = latest indexed block
    export_contract_version: str = "1"

    # Monitoring
    log_progress_every: int = 10

    def get_window(self) -> tuple:
        """Resolved (start, end) window; an open end means now (UTC)"""
        end = self.end_timestamp
        if end is None:
            end = int(datetime.now(timezone.utc).timestamp())
        return self.start_timestamp, end


def get_subgraph_resources():
    """
    Returns the subgraph resources

    Resources:
    - blocks_subgraph: block index (timestamp -> block number)
    - registry_subgraph: staking registry (operators, delegations, slashing events)
    """
    registry_kwargs = {}
    # An unset key leaves the registry endpoint unauthenticated
    if os.getenv("SUBGRAPH_API_KEY"):
        registry_kwargs["api_key"] = dg.EnvVar("SUBGRAPH_API_KEY")

    return {
        "blocks_subgraph": SubgraphResource(
            endpoint=dg.EnvVar("BLOCKS_SUBGRAPH_URL"),
        ),
        "registry_subgraph": SubgraphResource(
            endpoint=dg.EnvVar("REGISTRY_SUBGRAPH_URL"),
            **registry_kwargs,
        ),
    }
