# query_builders/block_builder.py
from .base_builder import BaseQueryBuilder

blocks_at_timestamp_query = """
query BlocksAtTimestamp($timestamp: BigInt!) {
    blocks(where: {timestamp: $timestamp}) {
        id
        number
        timestamp
    }
}
"""


class BlockAtTimestampQueryBuilder(BaseQueryBuilder):
    def build_query(self, timestamp: int):
        return blocks_at_timestamp_query, {"timestamp": str(timestamp)}
