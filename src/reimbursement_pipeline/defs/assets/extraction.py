# reimbursement_pipeline/defs/assets/extraction.py
"""
Extraction Assets - Slashing events inside the configured time window
"""

import asyncio
from typing import List

from dagster import asset, OpExecutionContext

from reimbursement_pipeline.models.slashing import SlashingEvent
from reimbursement_pipeline.services.readers.event_paginator import (
    SlashingEventPaginator,
)
from ..resources import SubgraphResource, ReimbursementConfigResource


async def fetch_slashing_events(
    logger,
    registry_subgraph: SubgraphResource,
    settings: ReimbursementConfigResource,
) -> List[SlashingEvent]:
    start, end = settings.get_window()
    async with registry_subgraph.get_client(logger) as client:
        paginator = SlashingEventPaginator(client, logger, page_size=settings.page_size)
        return await paginator.fetch_events(start, end, settings.min_amount_wei)


@asset(
    description="Slashing events in the configured window, ascending by date",
    compute_kind="graphql",
)
def slashing_events_in_window(
    context: OpExecutionContext,
    registry_subgraph: SubgraphResource,
    settings: ReimbursementConfigResource,
) -> list:
    """
    Page through the registry subgraph for slashing events.

    Returns:
        Events at or above the configured minimum amount
    """
    events = asyncio.run(fetch_slashing_events(context.log, registry_subgraph, settings))

    context.log.info(
        f"Found {len(events)} slashing events, "
        f"sample operators: {', '.join(e.operator_id for e in events[:5]) if events else 'None'}"
    )
    return events
