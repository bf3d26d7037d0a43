import copy
from pathlib import Path

import pytest
import yaml


def make_diff(files: dict[str, list[str]]) -> str:
    """Build a minimal unified diff adding ``lines`` to each file."""
    chunks = []
    for path, lines in files.items():
        chunks.append(f"diff --git a/{path} b/{path}")
        chunks.append("index 1111111..2222222 100644")
        chunks.append(f"--- a/{path}")
        chunks.append(f"+++ b/{path}")
        chunks.append(f"@@ -1,1 +1,{len(lines) + 1} @@")
        chunks.append(" unchanged")
        chunks.extend(f"+{line}" for line in lines)
    return "\n".join(chunks) + "\n"


def write_yaml(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


CONSTITUTION = {
    "governance": {
        "voters": [{"role": "architects"}, {"role": "leads"}],
        "quorum": {"type": "majority"},
        "forbid_self_approval": True,
        "allow_vote_change": False,
        "proposal_ttl_days": 7,
        "per_rule_overrides": {
            "domain_no_infra": {"quorum": {"type": "unanimous"}},
        },
        "exceptions": {"require_approval": True},
    },
    "identity": {"allowed_domains": ["example.com"]},
    "roles": {
        "architects": {"members": [{"email": "alice@example.com"}, {"email": "bob@example.com"}]},
        "leads": {"members": [{"email": "bob@example.com"}, {"email": "carol@example.com"}]},
        "developers": {"members": [{"email": "dave@example.com"}]},
    },
}

RULES = {
    "rules": [
        {
            "id": "domain_no_infra",
            "description": "Domain layer must not depend on infra",
            "type": "imports_forbidden",
            "config": {"from_globs": ["domain/**"], "forbid_globs": ["infra/**"]},
            "severity": "error",
        },
        {
            "id": "money_minor_units",
            "description": "Money must use int minor units",
            "type": "diff_pattern_forbidden",
            "config": {"forbidden_regexes": [r"\bDouble\b"], "only_in_paths": ["domain/**"]},
            "severity": "warning",
        },
    ]
}


@pytest.fixture
def make_store(tmp_path):
    """Factory creating a populated .agreements/ directory under tmp_path."""

    def _make(constitution=None, rules=None, exceptions=None, proposals=None, votes=None):
        root = tmp_path / ".agreements"
        root.mkdir(exist_ok=True)
        write_yaml(root / "constitution.yml", CONSTITUTION if constitution is None else constitution)
        write_yaml(root / "rules.yml", RULES if rules is None else rules)
        for exception in exceptions or []:
            write_yaml(root / "exceptions" / f"{exception['id']}.yml", exception)
        for proposal in proposals or []:
            write_yaml(root / "proposals" / f"{proposal['id']}.yml", proposal)
        for proposal_id, proposal_votes in (votes or {}).items():
            for vote in proposal_votes:
                name = vote["voter_email"].split("@")[0]
                write_yaml(root / "votes" / proposal_id / f"{name}.yml", vote)
        return root

    return _make


@pytest.fixture
def diff_builder():
    return make_diff


@pytest.fixture
def constitution_data():
    """A deep copy of the default constitution document."""
    return copy.deepcopy(CONSTITUTION)
