# services/errors.py
"""
Fatal errors raised while computing reimbursements.
Each error keeps the raw inputs that produced it so a failed run can be
diagnosed without querying the subgraphs again.
"""

from typing import Any, Dict, List, Optional


class ReimbursementError(Exception):
    """Base class for every fatal reimbursement pipeline error"""


class SubgraphQueryError(ReimbursementError):
    def __init__(self, endpoint: str, errors: List[Dict[str, Any]]):
        self.endpoint = endpoint
        self.errors = errors
        super().__init__(f"Subgraph query to {endpoint} failed: {errors}")


class AmbiguousBlockError(ReimbursementError):
    def __init__(self, timestamp: int, blocks: List[Dict[str, Any]]):
        self.timestamp = timestamp
        self.blocks = blocks
        super().__init__(
            f"Expected exactly 1 block at timestamp {timestamp}, got {len(blocks)}: {blocks}"
        )


class OperatorNotFoundError(ReimbursementError):
    def __init__(self, operator_id: str, block_number: int):
        self.operator_id = operator_id
        self.block_number = block_number
        super().__init__(f"Operator not found: {operator_id} at block {block_number}")


class OperatorHasNoDelegationsError(ReimbursementError):
    def __init__(self, operator_id: str, block_number: int, snapshot: Any = None):
        self.operator_id = operator_id
        self.block_number = block_number
        self.snapshot = snapshot
        super().__init__(
            f"Operator doesn't have delegations: {operator_id}, block {block_number}: {snapshot}"
        )


class InvalidExchangeRateError(ReimbursementError):
    def __init__(self, snapshot: Any):
        self.snapshot = snapshot
        super().__init__(
            "Cannot derive exchange rate (value without earnings "
            f"{snapshot.value_without_earnings} / total supply "
            f"{snapshot.operator_token_total_supply}): {snapshot}"
        )


class OwnerDelegationMissingError(ReimbursementError):
    def __init__(self, owner: str, snapshot: Any):
        self.owner = owner
        self.snapshot = snapshot
        super().__init__(f"Owner's delegation not found for owner {owner}: {snapshot}")


class ReimbursementMismatchError(ReimbursementError):
    def __init__(
        self,
        total: int,
        slashed: int,
        reimbursements: List[Any],
        tolerance: Optional[int] = None,
    ):
        self.total = total
        self.slashed = slashed
        self.reimbursements = reimbursements
        self.tolerance = tolerance
        super().__init__(
            f"Reimbursements don't match slashed amount: total {total} wei, "
            f"slashed {slashed} wei, tolerance {tolerance} wei, "
            f"reimbursements {reimbursements}"
        )


class DuplicateDelegationError(ReimbursementError):
    def __init__(
        self,
        operator_id: str,
        block_number: int,
        delegator_ids: List[str],
        snapshot: Any = None,
    ):
        self.operator_id = operator_id
        self.block_number = block_number
        self.delegator_ids = delegator_ids
        self.snapshot = snapshot
        super().__init__(
            f"Operator {operator_id} has more than one delegation per delegator "
            f"at block {block_number}: {delegator_ids}"
        )
