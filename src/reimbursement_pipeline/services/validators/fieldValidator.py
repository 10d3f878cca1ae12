from typing import Dict, Any
from decimal import Decimal, InvalidOperation


class FieldValidator:
    """Handles field validation and transformation rules for raw subgraph records."""

    def __init__(self):
        self.wei_fields = set()
        self.decimal_fields = set()
        self.id_fields = set()
        self.timestamp_fields = set()
        self.nullable_fields = set()

    def add_wei_field(self, field_name: str, nullable: bool = False):
        """Register a field holding an unsigned integer amount (wei, token units)."""
        self.wei_fields.add(field_name)
        if nullable:
            self.nullable_fields.add(field_name)
        return self

    def add_decimal_field(self, field_name: str, nullable: bool = False):
        """Register a field that should be ensured as Decimal."""
        self.decimal_fields.add(field_name)
        if nullable:
            self.nullable_fields.add(field_name)
        return self

    def add_id_field(self, field_name: str, nullable: bool = False):
        """Register an identifier (address) field, normalized to lower case."""
        self.id_fields.add(field_name)
        if nullable:
            self.nullable_fields.add(field_name)
        return self

    def add_timestamp_field(self, field_name: str, nullable: bool = False):
        """Register a Unix timestamp field, kept as a base-10 string of seconds."""
        self.timestamp_fields.add(field_name)
        if nullable:
            self.nullable_fields.add(field_name)
        return self

    def validate_and_transform(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate and transform a row according to registered rules.

        Raises:
            ValueError: If validation fails
        """
        transformed = row.copy()

        # Step 1: Integer amounts
        self._transform_wei(transformed)

        # Step 2: Decimal ratios
        self._validate_decimals(transformed)

        # Step 3: Identifiers
        self._normalize_ids(transformed)

        # Step 4: Timestamps
        self._normalize_timestamps(transformed)

        return transformed

    def _check_present(self, row: Dict[str, Any], field: str) -> bool:
        """Return False when the field is legitimately empty, raise when it must not be."""
        value = row.get(field)
        if value is None:
            if field not in self.nullable_fields:
                raise ValueError(f"Field '{field}' cannot be None")
            row[field] = None
            return False
        return True

    def _transform_wei(self, row: Dict[str, Any]) -> None:
        for field in self.wei_fields:
            if not self._check_present(row, field):
                continue

            value = row[field]
            if isinstance(value, bool) or not isinstance(value, (int, str)):
                raise ValueError(
                    f"Field '{field}' must be an integer or integer string, got {type(value)}"
                )
            try:
                amount = int(value)
            except ValueError:
                raise ValueError(f"Field '{field}' is not an integer: {value!r}")
            if amount < 0:
                raise ValueError(f"Field '{field}' cannot be negative: {amount}")
            row[field] = amount

    def _validate_decimals(self, row: Dict[str, Any]) -> None:
        for field in self.decimal_fields:
            if not self._check_present(row, field):
                continue

            value = row[field]
            if not isinstance(value, (Decimal, int, str)):
                raise ValueError(f"Field '{field}' must be numeric, got {type(value)}")

            if not isinstance(value, Decimal):
                try:
                    row[field] = Decimal(str(value))
                except InvalidOperation:
                    raise ValueError(f"Field '{field}' is not a decimal: {value!r}")

    def _normalize_ids(self, row: Dict[str, Any]) -> None:
        for field in self.id_fields:
            if not self._check_present(row, field):
                continue

            value = row[field]
            if not isinstance(value, str):
                raise ValueError(f"Field '{field}' must be a string, got {type(value)}")
            row[field] = value.strip().lower()

    def _normalize_timestamps(self, row: Dict[str, Any]) -> None:
        for field in self.timestamp_fields:
            if not self._check_present(row, field):
                continue

            value = row[field]
            try:
                seconds = int(value)
            except (TypeError, ValueError):
                raise ValueError(
                    f"Field '{field}' must be a Unix timestamp in seconds, got {value!r}"
                )
            row[field] = str(seconds)
