"""
Tests for sequential per-event reimbursement processing
"""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from reimbursement_pipeline.models.slashing import Reimbursement
from reimbursement_pipeline.services.allocators.reimbursement_allocator import (
    ReimbursementAllocator,
)
from reimbursement_pipeline.services.errors import (
    AmbiguousBlockError,
    OperatorNotFoundError,
)
from reimbursement_pipeline.services.processors.process_slashing_events import (
    calculate_reimbursements,
    process_slashing_events,
)
from reimbursement_pipeline.services.readers.block_resolver import BlockResolver
from reimbursement_pipeline.services.readers.snapshot_reader import (
    OperatorSnapshotReader,
)

from conftest import FakeSubgraph, make_event

logger = logging.getLogger("test")


def operator_record(owner_balance, delegations):
    rows = [{"delegator": {"id": "0xowner"}, "operatorTokenBalanceWei": str(owner_balance)}]
    rows += [
        {"delegator": {"id": delegator}, "operatorTokenBalanceWei": str(balance)}
        for delegator, balance in delegations.items()
    ]
    total = owner_balance + sum(delegations.values())
    return {
        "delegations": rows,
        "exchangeRate": "1",
        "operatorTokenTotalSupplyWei": str(total),
        "owner": "0xowner",
        "valueWithoutEarnings": str(total),
    }


@pytest.fixture
def blocks():
    return FakeSubgraph(
        blocks=[
            {"id": "0x1", "number": "100", "timestamp": "1000"},
            {"id": "0x2", "number": "200", "timestamp": "2000"},
        ]
    )


@pytest.fixture
def registry():
    return FakeSubgraph(
        operators={
            ("0xop", 99): operator_record(5000, {"0xalice": 1000}),
            ("0xop", 199): operator_record(0, {"0xalice": 300, "0xbob": 700}),
        }
    )


async def run(events, blocks, registry, emit):
    return await process_slashing_events(
        logger,
        events,
        BlockResolver(blocks, logger),
        OperatorSnapshotReader(registry, logger),
        ReimbursementAllocator(logger=logger),
        emit,
    )


class TestCalculateReimbursements:
    @pytest.mark.asyncio
    async def test_reads_state_one_block_before_slash(self, blocks, registry):
        result = await calculate_reimbursements(
            make_event(1000, date="2000"),
            BlockResolver(blocks),
            OperatorSnapshotReader(registry),
            ReimbursementAllocator(),
        )

        assert registry.calls[0][1] == {"operatorId": "0xop", "block": 199}
        assert result == [
            Reimbursement("0xalice", 300),
            Reimbursement("0xbob", 700),
            Reimbursement("0xowner", 0),
        ]


class TestProcessSlashingEvents:
    @pytest.mark.asyncio
    async def test_emits_each_event_in_order(self, blocks, registry):
        emitted = []
        events = [make_event(100, date="1000"), make_event(1000, date="2000")]

        processed = await run(events, blocks, registry, lambda e, r: emitted.append((e, r)))

        assert processed == 2
        assert [event.date for event, _ in emitted] == ["1000", "2000"]
        assert [[r.to_line() for r in rs] for _, rs in emitted] == [
            ["0xowner,100"],
            ["0xalice,300", "0xbob,700", "0xowner,0"],
        ]

    @pytest.mark.asyncio
    async def test_no_events(self, blocks, registry):
        emit = MagicMock()

        assert await run([], blocks, registry, emit) == 0
        emit.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_aborts_after_earlier_output(self, blocks, registry):
        emitted = []
        events = [
            make_event(100, date="1000"),
            make_event(100, date="1500"),
            make_event(1000, date="2000"),
        ]

        with pytest.raises(AmbiguousBlockError):
            await run(events, blocks, registry, lambda e, r: emitted.append(e.date))

        assert emitted == ["1000"]

    @pytest.mark.asyncio
    async def test_missing_operator_aborts(self, blocks):
        with pytest.raises(OperatorNotFoundError):
            await run([make_event(1, date="1000")], blocks, FakeSubgraph(), MagicMock())

    @pytest.mark.asyncio
    async def test_calls_are_sequential(self):
        order = []

        resolver = MagicMock()
        resolver.resolve = AsyncMock(side_effect=lambda ts: order.append(("block", ts)) or 10)
        reader = MagicMock()
        reader.read_snapshot = AsyncMock(
            side_effect=lambda op, block: order.append(("snapshot", block)) or MagicMock()
        )
        allocator = MagicMock()
        allocator.allocate = MagicMock(return_value=[])

        await process_slashing_events(
            logger,
            [make_event(1, date="1"), make_event(1, date="2")],
            resolver,
            reader,
            allocator,
            lambda e, r: order.append(("emit", e.date)),
        )

        assert order == [
            ("block", 1),
            ("snapshot", 9),
            ("emit", "1"),
            ("block", 2),
            ("snapshot", 9),
            ("emit", "2"),
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("every", [0, -1])
    async def test_progress_interval_below_one_rejected(self, blocks, registry, every):
        emit = MagicMock()

        with pytest.raises(ValueError, match="log_progress_every"):
            await process_slashing_events(
                logger,
                [make_event(100, date="1000")],
                BlockResolver(blocks),
                OperatorSnapshotReader(registry),
                ReimbursementAllocator(),
                emit,
                log_progress_every=every,
            )

        emit.assert_not_called()
        assert blocks.calls == []
