"""Voting, quorum and role logic."""

from guardian.governance.quorum import calculate_quorum, calculate_required
from guardian.governance.roles import RoleResolver, eligible_voters
from guardian.governance.tally import compute_tally, resolve_quorum_config

__all__ = [
    "RoleResolver",
    "calculate_quorum",
    "calculate_required",
    "compute_tally",
    "eligible_voters",
    "resolve_quorum_config",
]
