# services/readers/block_resolver.py

import logging
from typing import Optional

from .base import BaseReader
from ..errors import AmbiguousBlockError
from ..query_builders.block_builder import BlockAtTimestampQueryBuilder


class BlockResolver(BaseReader):
    """Maps a Unix timestamp to the single block recorded at exactly that second"""

    def __init__(self, client, logger: Optional[logging.Logger] = None):
        super().__init__(client, logger, BlockAtTimestampQueryBuilder())

    async def resolve(self, timestamp: int) -> int:
        """
        Args:
            timestamp: Unix timestamp in seconds

        Returns:
            The block number whose timestamp equals `timestamp`

        Raises:
            AmbiguousBlockError: If zero or several blocks match. There is no
                nearest-block fallback.
        """
        query, variables = self.query_builder.build_query(timestamp)
        data = await self.run_query(query, variables)
        blocks = data.get("blocks") or []

        if len(blocks) != 1:
            raise AmbiguousBlockError(timestamp, blocks)

        block_number = int(blocks[0]["number"])
        self.logger.debug(f"Timestamp {timestamp} resolved to block {block_number}")
        return block_number
