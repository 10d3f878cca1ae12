"""
Dagster Definitions for the Reimbursement Pipeline
"""

from dagster import Definitions

from reimbursement_pipeline.defs import (
    reimbursement_assets,
    delegation_export_assets,
    reimbursements_job,
    delegations_job,
    resources,
)

defs = Definitions(
    assets=[
        *reimbursement_assets,
        *delegation_export_assets,
    ],
    jobs=[
        reimbursements_job,
        delegations_job,
    ],
    resources=resources,
)
