from decimal import Decimal

from web3 import Web3


def normalize_id(value: str) -> str:
    """Canonical (lower-case) form of an operator / delegator identifier."""
    return value.strip().lower()


def wei_to_ether(amount_wei: int) -> Decimal:
    """Convert an integer wei amount to ether using Web3.from_wei."""
    # from_wei returns a plain int 0 for zero amounts
    return Decimal(Web3.from_wei(int(amount_wei), "ether"))


def format_ether(amount_wei: int) -> str:
    """Human readable ether string for logs and exports."""
    value = wei_to_ether(amount_wei)
    if value == value.to_integral_value():
        return f"{value.quantize(Decimal(1))}.0"
    return format(value.normalize(), "f")
