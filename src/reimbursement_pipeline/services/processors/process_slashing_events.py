from datetime import datetime, timezone
from typing import Callable, List, Sequence

from reimbursement_pipeline.models.slashing import Reimbursement, SlashingEvent
from reimbursement_pipeline.services.allocators.reimbursement_allocator import (
    ReimbursementAllocator,
)
from reimbursement_pipeline.services.readers.block_resolver import BlockResolver
from reimbursement_pipeline.services.readers.snapshot_reader import (
    OperatorSnapshotReader,
)

EmitFn = Callable[[SlashingEvent, List[Reimbursement]], None]


async def calculate_reimbursements(
    event: SlashingEvent,
    block_resolver: BlockResolver,
    snapshot_reader: OperatorSnapshotReader,
    allocator: ReimbursementAllocator,
) -> List[Reimbursement]:
    """Resolve the slashing block, read state one block earlier and allocate."""
    block_number = await block_resolver.resolve(event.timestamp)
    snapshot = await snapshot_reader.read_snapshot(event.operator_id, block_number - 1)
    return allocator.allocate(event, snapshot)


async def process_slashing_events(
    logger,
    events: Sequence[SlashingEvent],
    block_resolver: BlockResolver,
    snapshot_reader: OperatorSnapshotReader,
    allocator: ReimbursementAllocator,
    emit: EmitFn,
    log_progress_every: int = 10,
) -> int:
    """
    Sequential per-event processing. Each event's reimbursements are emitted
    before the next event starts; the first error aborts the run.

    Returns:
        Number of events processed

    Raises:
        ValueError: If log_progress_every is below 1
    """
    if log_progress_every < 1:
        raise ValueError(f"log_progress_every must be at least 1: {log_progress_every}")

    if not events:
        logger.info("No slashing events to process")
        return 0

    start_time = datetime.now(timezone.utc)
    total_reimbursements = 0

    for idx, event in enumerate(events, 1):
        if idx % log_progress_every == 0:
            logger.info(
                f"Reimbursements {idx}/{len(events)}: operator {event.operator_id} at {event.date}"
            )

        reimbursements = await calculate_reimbursements(
            event, block_resolver, snapshot_reader, allocator
        )
        emit(event, reimbursements)
        total_reimbursements += len(reimbursements)

    duration = (datetime.now(timezone.utc) - start_time).total_seconds()
    logger.info(
        f"Reimbursements: Processed {len(events)} slashing events, "
        f"reimbursement rows: {total_reimbursements}, "
        f"duration: {duration:.2f}s"
    )

    return len(events)

