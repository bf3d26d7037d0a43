"""Voter eligibility derived from constitution roles."""

from guardian.models.agreement_models import Constitution, Role, VoterRef


class RoleResolver:
    """Answers role and voter questions for a set of role definitions.

    Eligible voters are always deduplicated by email: someone listed under two
    voter roles is one voter.
    """

    def __init__(self, roles: dict[str, Role], voters: list[VoterRef]) -> None:
        self.roles = roles
        self.voters = voters

    @classmethod
    def from_constitution(cls, constitution: Constitution) -> "RoleResolver":
        return cls(constitution.roles, constitution.governance.voters)

    def _voter_roles(self) -> list[Role]:
        # Unknown role references are skipped rather than reported
        return [self.roles[ref.role] for ref in self.voters if ref.role in self.roles]

    def eligible_voters(self) -> list[str]:
        """Emails reachable through voter roles, first-seen order, no duplicates."""
        seen: set[str] = set()
        voters: list[str] = []
        for role in self._voter_roles():
            for member in role.members:
                if member.email not in seen:
                    seen.add(member.email)
                    voters.append(member.email)
        return voters

    def is_voter(self, email: str) -> bool:
        return any(
            member.email == email
            for role in self._voter_roles()
            for member in role.members
        )

    def roles_of(self, email: str) -> list[str]:
        """All role names (voter or not) that list ``email`` as a member."""
        return [
            name
            for name, role in self.roles.items()
            if any(member.email == email for member in role.members)
        ]


def eligible_voters(constitution: Constitution) -> list[str]:
    return RoleResolver.from_constitution(constitution).eligible_voters()
