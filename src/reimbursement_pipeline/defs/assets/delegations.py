# reimbursement_pipeline/defs/assets/delegations.py
"""
Delegation Export - Every operator's delegators and operator token balances
"""

import asyncio
import sys

from dagster import asset, OpExecutionContext, Output

from reimbursement_pipeline.services.readers.operator_delegations import (
    OperatorDelegationsReader,
)
from ..resources import SubgraphResource, ReimbursementConfigResource


async def export_delegations(logger, registry_subgraph, settings):
    async with registry_subgraph.get_client(logger) as client:
        reader = OperatorDelegationsReader(client, logger, page_size=settings.page_size)
        return await reader.read_rows(
            settings.export_contract_version, settings.export_block
        )


@asset(
    description="Operator delegations at the configured block, printed as CSV",
    compute_kind="graphql",
)
def operator_delegations_export(
    context: OpExecutionContext,
    registry_subgraph: SubgraphResource,
    settings: ReimbursementConfigResource,
) -> Output[int]:
    df = asyncio.run(export_delegations(context.log, registry_subgraph, settings))
    df.to_csv(sys.stdout, index=False)

    return Output(
        len(df),
        metadata={
            "operators": int(df["OperatorId"].nunique()) if not df.empty else 0,
            "block": str(settings.export_block) if settings.export_block is not None else "latest",
        },
    )
