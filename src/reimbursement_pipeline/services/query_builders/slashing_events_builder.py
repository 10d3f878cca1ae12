# query_builders/slashing_events_builder.py

from .base_builder import BaseQueryBuilder
from typing import Tuple, Dict, Optional

slashing_events_window_query = """
query SlashingEventsWindow($start: BigInt!, $end: BigInt!, $first: Int!) {
    slashingEvents(
        orderBy: date
        orderDirection: asc
        first: $first
        where: {date_gte: $start, date_lte: $end}
    ) {
        id
        amount
        date
        operator {
            id
        }
    }
}
"""

slashing_events_at_date_query = """
query SlashingEventsAtDate($date: BigInt!, $afterId: ID!, $first: Int!) {
    slashingEvents(
        orderBy: id
        orderDirection: asc
        first: $first
        where: {date: $date, id_gt: $afterId}
    ) {
        id
        amount
        date
        operator {
            id
        }
    }
}
"""


class SlashingEventsQueryBuilder(BaseQueryBuilder):
    """
    Builds the two slashing event page shapes:
    1. A date-ordered page inside [start, end]
    2. An id-ordered page of events sharing one exact date (page boundary completion)
    """

    def build_query(self, start: int, end: int, first: int) -> Tuple[str, Dict]:
        return slashing_events_window_query, {
            "start": str(start),
            "end": str(end),
            "first": first,
        }

    def build_at_date_query(
        self, date: int, first: int, after_id: Optional[str] = None
    ) -> Tuple[str, Dict]:
        return slashing_events_at_date_query, {
            "date": str(date),
            "afterId": after_id or "",
            "first": first,
        }
