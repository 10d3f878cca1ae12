# query_builders/operator_builder.py

from .base_builder import BaseQueryBuilder
from typing import Tuple, Dict

operator_at_block_query = """
query OperatorAtBlock($operatorId: ID!, $block: Int!) {
    operator(id: $operatorId, block: {number: $block}) {
        delegations {
            delegator {
                id
            }
            operatorTokenBalanceWei
        }
        exchangeRate
        operatorTokenTotalSupplyWei
        owner
        valueWithoutEarnings
    }
}
"""


class OperatorAtBlockQueryBuilder(BaseQueryBuilder):
    """Builds the point-in-time operator + delegations query"""

    def build_query(self, operator_id: str, block_number: int) -> Tuple[str, Dict]:
        """
        Operator state as of `block_number`. The id must already be
        lower-cased; subgraph entity ids are case sensitive.
        """
        return operator_at_block_query, {
            "operatorId": operator_id,
            "block": block_number,
        }
