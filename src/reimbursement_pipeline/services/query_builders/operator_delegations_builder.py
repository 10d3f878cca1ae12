# query_builders/operator_delegations_builder.py

from .base_builder import BaseQueryBuilder
from typing import Tuple, Dict, Optional


def _operators_query(with_block: bool) -> str:
    block_variable = ", $block: Int!" if with_block else ""
    block_argument = "\n        block: {number: $block}" if with_block else ""
    return f"""
query OperatorDelegations($contractVersion: BigInt!, $afterId: ID!, $first: Int!{block_variable}) {{
    operators(
        orderBy: id
        orderDirection: asc
        first: $first
        where: {{contractVersion: $contractVersion, id_gt: $afterId}}{block_argument}
    ) {{
        id
        delegations {{
            delegator {{
                id
            }}
            operatorTokenBalanceWei
        }}
        owner
        metadataJsonString
        operatorTokenTotalSupplyWei
        valueWithoutEarnings
    }}
}}
"""


class OperatorDelegationsQueryBuilder(BaseQueryBuilder):
    """Builds id-cursor pages of all operators with their delegations"""

    def build_query(
        self,
        contract_version: str,
        first: int,
        after_id: Optional[str] = None,
        block_number: Optional[int] = None,
    ) -> Tuple[str, Dict]:
        """
        If block_number is None the query reads the latest indexed state.
        """
        variables = {
            "contractVersion": str(contract_version),
            "afterId": after_id or "",
            "first": first,
        }
        if block_number is not None:
            variables["block"] = block_number

        return _operators_query(block_number is not None), variables
