# services/readers/event_paginator.py

import logging
from typing import Any, Dict, List, Optional

from .base import BaseReader
from ..query_builders.slashing_events_builder import SlashingEventsQueryBuilder
from ..validators.fieldValidator import FieldValidator
from reimbursement_pipeline.models.slashing import SlashingEvent

DEFAULT_PAGE_SIZE = 1000


class SlashingEventPaginator(BaseReader):
    """
    Fetches every slashing event in a time window from a page-limited subgraph.

    Pages are requested in ascending date order. A short page means the window
    is exhausted; after a full page the lower bound moves to the last date + 1.
    Before moving past a full page, all events at that last date are re-read
    with an id cursor, so events sharing the boundary second are neither
    duplicated nor dropped.
    """

    def __init__(
        self,
        client,
        logger: Optional[logging.Logger] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")

        field_validator = FieldValidator()
        field_validator.add_wei_field("amount")
        field_validator.add_timestamp_field("date")
        field_validator.add_id_field("operator_id")

        super().__init__(client, logger, SlashingEventsQueryBuilder(), field_validator)
        self.page_size = page_size

    async def fetch_events(
        self, start: int, end: int, min_amount: int = 0
    ) -> List[SlashingEvent]:
        """
        Args:
            start: Window start, Unix seconds (inclusive)
            end: Window end, Unix seconds (inclusive)
            min_amount: Events with amount below this (wei) are dropped after paging

        Returns:
            Events sorted ascending by date
        """
        events: List[SlashingEvent] = []
        cursor = start
        pages = 0

        while cursor <= end:
            page = await self._fetch_window_page(cursor, end)
            pages += 1

            if len(page) < self.page_size:
                events.extend(page)
                break

            boundary = page[-1].timestamp
            events.extend(event for event in page if event.timestamp < boundary)
            events.extend(await self._fetch_all_at_date(boundary))
            self.logger.info(
                f"Slashing events page {pages} full, {len(events)} events so far, "
                f"continuing after {boundary}"
            )
            cursor = boundary + 1

        kept = [event for event in events if event.amount >= min_amount]
        self.logger.info(
            f"Fetched {len(events)} slashing events in [{start}, {end}] over {pages} pages, "
            f"{len(events) - len(kept)} below minimum amount {min_amount}"
        )
        return kept

    async def _fetch_window_page(self, start: int, end: int) -> List[SlashingEvent]:
        query, variables = self.query_builder.build_query(start, end, self.page_size)
        data = await self.run_query(query, variables)
        return self._to_events(data.get("slashingEvents") or [])

    async def _fetch_all_at_date(self, date: int) -> List[SlashingEvent]:
        events: List[SlashingEvent] = []
        after_id = None

        while True:
            query, variables = self.query_builder.build_at_date_query(
                date, self.page_size, after_id
            )
            data = await self.run_query(query, variables)
            page = self._to_events(data.get("slashingEvents") or [])
            events.extend(page)

            if len(page) < self.page_size:
                return events
            if not page[-1].event_id:
                raise ValueError(f"Slashing event without id at date {date}: {page[-1]}")
            after_id = page[-1].event_id

    def _to_events(self, records: List[Dict[str, Any]]) -> List[SlashingEvent]:
        rows = [
            {
                "event_id": record.get("id"),
                "amount": record.get("amount"),
                "date": record.get("date"),
                "operator_id": (record.get("operator") or {}).get("id"),
            }
            for record in records
        ]
        return [
            SlashingEvent(
                amount=row["amount"],
                date=row["date"],
                operator_id=row["operator_id"],
                event_id=row["event_id"],
            )
            for row in self.validate_rows(rows)
        ]
