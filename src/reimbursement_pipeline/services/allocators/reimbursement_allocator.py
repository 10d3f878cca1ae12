# services/allocators/reimbursement_allocator.py
"""
Distributes a slashed amount between an operator's owner and its delegators.

The owner absorbs the loss first. If the owner's stake does not cover it,
the owner loses their whole stake and the remainder is split across the other
delegators in proportion to their operator token balances.

All ratios are exact Fractions; every wei amount is truncated.
"""

import logging
import math
from collections import Counter
from fractions import Fraction
from typing import List, Optional

from reimbursement_pipeline.models.slashing import (
    OperatorSnapshot,
    Reimbursement,
    SlashingEvent,
)
from reimbursement_pipeline.utils.normalizers import format_ether
from ..errors import (
    DuplicateDelegationError,
    InvalidExchangeRateError,
    OperatorHasNoDelegationsError,
    OwnerDelegationMissingError,
    ReimbursementMismatchError,
)

DEFAULT_TOLERANCE_WEI = 10000


class ReimbursementAllocator:
    def __init__(
        self,
        tolerance_wei: int = DEFAULT_TOLERANCE_WEI,
        logger: Optional[logging.Logger] = None,
    ):
        if tolerance_wei < 0:
            raise ValueError(f"tolerance_wei cannot be negative: {tolerance_wei}")
        self.tolerance_wei = tolerance_wei
        self.logger = logger or logging.getLogger(__name__)

    def allocate(
        self, event: SlashingEvent, snapshot: OperatorSnapshot
    ) -> List[Reimbursement]:
        """
        Args:
            event: The slashing event
            snapshot: Operator state one block before the slashing block

        Returns:
            Reimbursements sorted ascending by recipient

        Raises:
            OperatorHasNoDelegationsError: Snapshot has no delegations at all
            DuplicateDelegationError: A delegator, the owner included, has more
                than one delegation
            InvalidExchangeRateError: Total supply or value is zero
            OwnerDelegationMissingError: Owner has no delegation in the snapshot
            ReimbursementMismatchError: Total differs from the slashed amount
                by more than the tolerance
        """
        if not snapshot.delegations:
            raise OperatorHasNoDelegationsError(
                snapshot.operator_id, snapshot.block_number, snapshot
            )
        counts = Counter(delegation.delegator_id for delegation in snapshot.delegations)
        duplicates = sorted(delegator for delegator, count in counts.items() if count > 1)
        if duplicates:
            raise DuplicateDelegationError(
                snapshot.operator_id, snapshot.block_number, duplicates, snapshot
            )
        if snapshot.operator_token_total_supply == 0 or snapshot.value_without_earnings == 0:
            raise InvalidExchangeRateError(snapshot)

        slashed = event.amount
        total_supply = snapshot.operator_token_total_supply
        rate = Fraction(snapshot.value_without_earnings, total_supply)
        slashed_in_operator_tokens = math.floor(slashed / rate)

        owner_delegation = snapshot.find_delegation(snapshot.owner)
        if owner_delegation is None:
            raise OwnerDelegationMissingError(snapshot.owner, snapshot)
        owner_balance = owner_delegation.operator_token_balance

        if owner_balance >= slashed_in_operator_tokens:
            reimbursements = [Reimbursement(snapshot.owner, slashed)]
        else:
            reimbursements = self._allocate_shared(
                snapshot, slashed, rate, owner_balance
            )

        self._check_conservation(event, snapshot, reimbursements)
        return sorted(reimbursements, key=lambda reimbursement: reimbursement.recipient)

    def _allocate_shared(
        self,
        snapshot: OperatorSnapshot,
        slashed: int,
        rate: Fraction,
        owner_balance: int,
    ) -> List[Reimbursement]:
        owner_amount = math.floor(owner_balance * rate)
        reimbursements = [Reimbursement(snapshot.owner, owner_amount)]

        remaining_value = slashed - owner_amount
        remaining_pool = snapshot.operator_token_total_supply - owner_balance

        for delegation in snapshot.delegations:
            if delegation.delegator_id == snapshot.owner:
                continue
            if remaining_pool > 0:
                share = Fraction(delegation.operator_token_balance, remaining_pool)
                amount = math.floor(share * remaining_value)
            else:
                amount = 0
            reimbursements.append(Reimbursement(delegation.delegator_id, amount))

        return reimbursements

    def _check_conservation(
        self,
        event: SlashingEvent,
        snapshot: OperatorSnapshot,
        reimbursements: List[Reimbursement],
    ) -> None:
        total = sum(reimbursement.amount for reimbursement in reimbursements)
        if abs(total - event.amount) <= self.tolerance_wei:
            return

        self.logger.error(f"Reimbursements: {format_ether(total)}")
        self.logger.error(f"Slashed amount: {format_ether(event.amount)}")
        self.logger.error(
            f"Operator {snapshot.operator_id} at block {snapshot.block_number}: {reimbursements}"
        )
        raise ReimbursementMismatchError(
            total, event.amount, reimbursements, self.tolerance_wei
        )
