# reimbursement_pipeline/defs/assets/reimbursements.py
"""
Reimbursement Assets - Per-event reimbursement lines for owners and delegators
"""

import asyncio
import sys
from typing import List

import pandas as pd
from dagster import asset, AssetIn, OpExecutionContext, Output

from reimbursement_pipeline.models.slashing import Reimbursement, SlashingEvent
from reimbursement_pipeline.services.allocators.reimbursement_allocator import (
    ReimbursementAllocator,
)
from reimbursement_pipeline.services.processors.process_slashing_events import (
    process_slashing_events,
)
from reimbursement_pipeline.services.readers.block_resolver import BlockResolver
from reimbursement_pipeline.services.readers.snapshot_reader import (
    OperatorSnapshotReader,
)
from ..resources import SubgraphResource, ReimbursementConfigResource


def summarize_reimbursements(rows: List[dict]) -> dict:
    """Run metadata: rows, distinct recipients and total wei"""
    df = pd.DataFrame(rows, columns=["event_date", "operator_id", "recipient", "amount"])
    if df.empty:
        return {"reimbursement_rows": 0, "recipients": 0, "operators": 0, "total_wei": "0"}

    # Python ints, wei amounts overflow int64
    total = sum(df["amount"].tolist())
    return {
        "reimbursement_rows": len(df),
        "recipients": int(df["recipient"].nunique()),
        "operators": int(df["operator_id"].nunique()),
        "total_wei": str(total),
    }


async def compute_reimbursements(
    logger,
    events: List[SlashingEvent],
    blocks_subgraph: SubgraphResource,
    registry_subgraph: SubgraphResource,
    settings: ReimbursementConfigResource,
    emit,
) -> int:
    async with blocks_subgraph.get_client(logger) as blocks_client, \
            registry_subgraph.get_client(logger) as registry_client:
        return await process_slashing_events(
            logger,
            events,
            BlockResolver(blocks_client, logger),
            OperatorSnapshotReader(registry_client, logger),
            ReimbursementAllocator(settings.tolerance_wei, logger),
            emit,
            settings.log_progress_every,
        )


@asset(
    ins={"events": AssetIn("slashing_events_in_window")},
    description="Reimbursements per slashing event, printed as recipient,amountInWei",
    compute_kind="graphql",
)
def operator_reimbursements(
    context: OpExecutionContext,
    blocks_subgraph: SubgraphResource,
    registry_subgraph: SubgraphResource,
    settings: ReimbursementConfigResource,
    events: list,
) -> Output[int]:
    rows: List[dict] = []

    def emit(event: SlashingEvent, reimbursements: List[Reimbursement]) -> None:
        for reimbursement in reimbursements:
            sys.stdout.write(reimbursement.to_line() + "\n")
            rows.append(
                {
                    "event_date": event.date,
                    "operator_id": event.operator_id,
                    "recipient": reimbursement.recipient,
                    "amount": reimbursement.amount,
                }
            )
        sys.stdout.flush()

    processed = asyncio.run(
        compute_reimbursements(
            context.log, events, blocks_subgraph, registry_subgraph, settings, emit
        )
    )

    return Output(
        processed,
        metadata={"events_processed": processed, **summarize_reimbursements(rows)},
    )
