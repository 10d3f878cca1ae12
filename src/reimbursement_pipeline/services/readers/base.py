# services/readers/base.py

from typing import Any, Dict, List, Optional
import logging

from reimbursement_pipeline.services.validators.fieldValidator import FieldValidator


class BaseReader:
    """
    Generic reader for subgraph entities: builds a query, runs it through the
    subgraph client and validates the returned records.
    """

    def __init__(
        self,
        client,
        logger: Optional[logging.Logger],
        query_builder,
        field_validator: Optional[FieldValidator] = None,
    ):
        self.client = client
        self.logger = logger or logging.getLogger(__name__)
        self.query_builder = query_builder
        self.field_validator = field_validator or FieldValidator()

    async def run_query(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        """Execute a built query and return the response data object."""
        return await self.client.query(query, variables)

    def validate_rows(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Validate and transform raw records.

        Raises:
            ValueError: If a record is malformed (never skipped)
        """
        validated = []
        for idx, row in enumerate(rows):
            try:
                validated.append(self.field_validator.validate_and_transform(row))
            except ValueError as exc:
                raise ValueError(f"Invalid record {idx}: {exc}: {row}") from exc
        return validated
