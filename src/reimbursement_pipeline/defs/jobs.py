"""
Dagster Jobs for the reimbursement pipeline
"""

import dagster as dg

from reimbursement_pipeline.defs.assets import (
    slashing_events_in_window,
    operator_reimbursements,
    operator_delegations_export,
)

reimbursement_assets = [slashing_events_in_window, operator_reimbursements]

delegation_export_assets = [operator_delegations_export]

reimbursements_job = dg.define_asset_job(
    name="slashing_reimbursements",
    selection=dg.AssetSelection.assets(*reimbursement_assets),
    description="Fetch slashing events and compute reimbursements sequentially",
)

delegations_job = dg.define_asset_job(
    name="operator_delegations",
    selection=dg.AssetSelection.assets(*delegation_export_assets),
    description="Export operator delegations at a block",
)
