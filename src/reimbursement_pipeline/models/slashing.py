# models/slashing.py
"""
Immutable records for slashing events, operator snapshots and reimbursements
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple


@dataclass(frozen=True)
class SlashingEvent:
    amount: int
    date: str
    operator_id: str
    event_id: Optional[str] = None

    @property
    def timestamp(self) -> int:
        return int(self.date)


@dataclass(frozen=True)
class Delegation:
    delegator_id: str
    operator_token_balance: int


@dataclass(frozen=True)
class OperatorSnapshot:
    """Operator and delegation state frozen at one block."""

    operator_id: str
    block_number: int
    operator_token_total_supply: int
    exchange_rate: Decimal
    owner: str
    value_without_earnings: int
    delegations: Tuple[Delegation, ...]

    def find_delegation(self, delegator_id: str) -> Optional[Delegation]:
        for delegation in self.delegations:
            if delegation.delegator_id == delegator_id:
                return delegation
        return None


@dataclass(frozen=True)
class Reimbursement:
    recipient: str
    amount: int

    def to_line(self) -> str:
        """CSV output line: recipient,amountInWei"""
        return f"{self.recipient},{self.amount}"
