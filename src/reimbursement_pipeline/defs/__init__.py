"""
Reimbursement Pipeline Definitions Module
Exports assets, jobs, and resources
"""

from reimbursement_pipeline.defs.jobs import (
    reimbursement_assets,
    delegation_export_assets,
    reimbursements_job,
    delegations_job,
)

from reimbursement_pipeline.defs.resources import (
    ReimbursementConfigResource,
    SubgraphResource,
    get_subgraph_resources,
)

resources = {
    "settings": ReimbursementConfigResource(),
    **get_subgraph_resources(),
}

__all__ = [
    # Asset groups
    "reimbursement_assets",
    "delegation_export_assets",
    # Jobs
    "reimbursements_job",
    "delegations_job",
    # Resources
    "ReimbursementConfigResource",
    "SubgraphResource",
    "get_subgraph_resources",
    "resources",
]
