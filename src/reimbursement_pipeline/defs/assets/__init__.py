from .extraction import slashing_events_in_window
from .reimbursements import operator_reimbursements
from .delegations import operator_delegations_export

__all__ = [
    "slashing_events_in_window",
    "operator_reimbursements",
    "operator_delegations_export",
]
