# services/readers/snapshot_reader.py

import logging
from typing import Any, Dict, Optional

from .base import BaseReader
from ..errors import DuplicateDelegationError, OperatorNotFoundError
from ..query_builders.operator_builder import OperatorAtBlockQueryBuilder
from ..validators.fieldValidator import FieldValidator
from reimbursement_pipeline.models.slashing import Delegation, OperatorSnapshot
from reimbursement_pipeline.utils.normalizers import normalize_id


class OperatorSnapshotReader(BaseReader):
    """Reads operator state and its delegations as of one block"""

    def __init__(self, client, logger: Optional[logging.Logger] = None):
        field_validator = FieldValidator()
        field_validator.add_wei_field("operatorTokenTotalSupplyWei")
        field_validator.add_wei_field("valueWithoutEarnings")
        field_validator.add_decimal_field("exchangeRate")
        field_validator.add_id_field("owner")

        self.delegation_validator = FieldValidator()
        self.delegation_validator.add_id_field("delegator_id")
        self.delegation_validator.add_wei_field("operatorTokenBalanceWei")

        super().__init__(client, logger, OperatorAtBlockQueryBuilder(), field_validator)

    async def read_snapshot(self, operator_id: str, block_number: int) -> OperatorSnapshot:
        """
        Callers wanting pre-slash state pass the slashing block minus one; the
        slashing block itself may already carry the post-slash exchange rate.

        Raises:
            OperatorNotFoundError: If the operator does not exist at that block
            DuplicateDelegationError: If a delegator appears more than once
        """
        operator_id = normalize_id(operator_id)
        query, variables = self.query_builder.build_query(operator_id, block_number)
        data = await self.run_query(query, variables)

        record = data.get("operator")
        if not record:
            raise OperatorNotFoundError(operator_id, block_number)

        return self.to_snapshot(operator_id, block_number, record)

    def to_snapshot(
        self, operator_id: str, block_number: int, record: Dict[str, Any]
    ) -> OperatorSnapshot:
        operator = self.validate_rows([record])[0]

        delegation_rows = [
            {
                "delegator_id": (row.get("delegator") or {}).get("id"),
                "operatorTokenBalanceWei": row.get("operatorTokenBalanceWei"),
            }
            for row in operator.get("delegations") or []
        ]
        delegations = []
        seen = set()
        duplicates = []
        for row in delegation_rows:
            delegation = self.delegation_validator.validate_and_transform(row)
            if delegation["delegator_id"] in seen:
                duplicates.append(delegation["delegator_id"])
            seen.add(delegation["delegator_id"])
            delegations.append(
                Delegation(
                    delegator_id=delegation["delegator_id"],
                    operator_token_balance=delegation["operatorTokenBalanceWei"],
                )
            )

        if duplicates:
            raise DuplicateDelegationError(operator_id, block_number, sorted(set(duplicates)))

        return OperatorSnapshot(
            operator_id=operator_id,
            block_number=block_number,
            operator_token_total_supply=operator["operatorTokenTotalSupplyWei"],
            exchange_rate=operator["exchangeRate"],
            owner=operator["owner"],
            value_without_earnings=operator["valueWithoutEarnings"],
            delegations=tuple(delegations),
        )
