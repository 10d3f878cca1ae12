"""
Shared fixtures: an in-memory subgraph that answers the block, operator and
slashing event queries the readers issue.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

import pytest

from reimbursement_pipeline.models.slashing import (
    Delegation,
    OperatorSnapshot,
    SlashingEvent,
)


class FakeSubgraph:
    """Answers queries from in-memory records and records every call"""

    def __init__(
        self,
        blocks: Optional[List[Dict[str, Any]]] = None,
        operators: Optional[Dict[tuple, Dict[str, Any]]] = None,
        slashing_events: Optional[List[Dict[str, Any]]] = None,
        operator_list: Optional[List[Dict[str, Any]]] = None,
    ):
        self.blocks = blocks or []
        self.operators = operators or {}
        self.slashing_events = slashing_events or []
        self.operator_list = operator_list or []
        self.calls: List[tuple] = []

    async def query(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append((query, dict(variables)))

        if "blocks(" in query:
            matches = [
                block
                for block in self.blocks
                if str(block["timestamp"]) == variables["timestamp"]
            ]
            return {"blocks": matches}

        if "operator(" in query:
            key = (variables["operatorId"], variables["block"])
            return {"operator": self.operators.get(key)}

        if "slashingEvents(" in query and "date_gte" in query:
            start, end = int(variables["start"]), int(variables["end"])
            window = [
                event
                for event in sorted(self.slashing_events, key=lambda e: int(e["date"]))
                if start <= int(event["date"]) <= end
            ]
            return {"slashingEvents": window[: variables["first"]]}

        if "slashingEvents(" in query:
            date = int(variables["date"])
            after_id = variables["afterId"]
            at_date = sorted(
                (
                    event
                    for event in self.slashing_events
                    if int(event["date"]) == date and event["id"] > after_id
                ),
                key=lambda e: e["id"],
            )
            return {"slashingEvents": at_date[: variables["first"]]}

        if "operators(" in query:
            after_id = variables["afterId"]
            page = sorted(
                (op for op in self.operator_list if op["id"] > after_id),
                key=lambda op: op["id"],
            )
            return {"operators": page[: variables["first"]]}

        raise AssertionError(f"Unexpected query: {query}")


def make_event_record(event_id: str, date: int, amount: int = 10**18, operator: str = "0xop"):
    return {
        "id": event_id,
        "amount": str(amount),
        "date": str(date),
        "operator": {"id": operator},
    }


def make_snapshot(
    owner: str,
    balances: Dict[str, int],
    total_supply: Optional[int] = None,
    value_without_earnings: Optional[int] = None,
    operator_id: str = "0xop",
    block_number: int = 100,
) -> OperatorSnapshot:
    total = sum(balances.values()) if total_supply is None else total_supply
    value = total if value_without_earnings is None else value_without_earnings
    return OperatorSnapshot(
        operator_id=operator_id,
        block_number=block_number,
        operator_token_total_supply=total,
        exchange_rate=Decimal(value) / Decimal(total) if total else Decimal(0),
        owner=owner,
        value_without_earnings=value,
        delegations=tuple(
            Delegation(delegator_id, balance) for delegator_id, balance in balances.items()
        ),
    )


def make_event(amount: int, date: str = "1709733300", operator_id: str = "0xop") -> SlashingEvent:
    return SlashingEvent(amount=amount, date=date, operator_id=operator_id)


@pytest.fixture
def fake_subgraph():
    return FakeSubgraph()
