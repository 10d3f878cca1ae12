# services/readers/operator_delegations.py

import json
import logging
from typing import Any, Dict, List, Optional

import pandas as pd

from .base import BaseReader
from ..query_builders.operator_delegations_builder import (
    OperatorDelegationsQueryBuilder,
)
from ..validators.fieldValidator import FieldValidator
from reimbursement_pipeline.utils.normalizers import format_ether

EXPORT_COLUMNS = [
    "OperatorId",
    "OperatorName",
    "Owner",
    "TotalOperatorTokens",
    "DelegatorId",
    "DelegatorsOperatorTokens",
]


class OperatorDelegationsReader(BaseReader):
    """Flattens every operator's delegations into one export row per delegator"""

    def __init__(
        self, client, logger: Optional[logging.Logger] = None, page_size: int = 1000
    ):
        field_validator = FieldValidator()
        field_validator.add_id_field("id")
        field_validator.add_id_field("owner")
        field_validator.add_wei_field("operatorTokenTotalSupplyWei")
        field_validator.add_wei_field("valueWithoutEarnings")

        super().__init__(
            client, logger, OperatorDelegationsQueryBuilder(), field_validator
        )
        self.page_size = page_size

    async def fetch_operators(
        self, contract_version: str = "1", block_number: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Page through all operators with an id cursor."""
        operators: List[Dict[str, Any]] = []
        after_id = None

        while True:
            query, variables = self.query_builder.build_query(
                contract_version, self.page_size, after_id, block_number
            )
            data = await self.run_query(query, variables)
            page = data.get("operators") or []
            operators.extend(self.validate_rows(page))

            if len(page) < self.page_size:
                break
            after_id = page[-1]["id"]

        self.logger.info(
            f"Fetched {len(operators)} operators (contract version {contract_version}, "
            f"block {block_number if block_number is not None else 'latest'})"
        )
        return operators

    async def read_rows(
        self, contract_version: str = "1", block_number: Optional[int] = None
    ) -> pd.DataFrame:
        operators = await self.fetch_operators(contract_version, block_number)

        rows = []
        for operator in operators:
            name = self._operator_name(operator)
            total_supply = format_ether(operator["operatorTokenTotalSupplyWei"])
            for delegation in operator.get("delegations") or []:
                rows.append(
                    {
                        "OperatorId": operator["id"],
                        "OperatorName": name,
                        "Owner": operator["owner"],
                        "TotalOperatorTokens": total_supply,
                        "DelegatorId": delegation["delegator"]["id"].lower(),
                        "DelegatorsOperatorTokens": format_ether(
                            int(delegation["operatorTokenBalanceWei"])
                        ),
                    }
                )

        return pd.DataFrame(rows, columns=EXPORT_COLUMNS)

    def _operator_name(self, operator: Dict[str, Any]) -> str:
        metadata = operator.get("metadataJsonString")
        if not metadata:
            return ""
        try:
            parsed = json.loads(metadata)
        except json.JSONDecodeError:
            self.logger.warning(f"Invalid metadata JSON for operator {operator['id']}")
            return ""
        if not isinstance(parsed, dict):
            return ""
        return str(parsed.get("name") or "")
