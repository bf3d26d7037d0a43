"""CLI entry point for guardian."""
import argparse
import json
import sys
import traceback

from dotenv import load_dotenv

from guardian.agents.exceptions import AgentError
from guardian.config.exceptions import AgreementsError
from guardian.config.loader import (
    PROPOSALS_DIR,
    VOTES_DIR,
    find_agreements_dir,
    find_proposal,
    has_accepted_proposal,
    load_all_exceptions,
    load_all_proposals,
    load_constitution,
    load_rules,
    load_votes_for_proposal,
)
from guardian.config.validation import (
    validate_constitution,
    validate_exception,
    validate_proposal,
    validate_rules,
    validate_vote,
)
from guardian.models import Constitution, EngineResult, RulesFile, Severity, TallyResult, Violation
from guardian.governance.tally import compute_tally
from guardian.rules.engine import CheckEngine
from guardian.rules.exceptions import RuleEngineError
from guardian.rules.meta_check import MetaChecker
from guardian.utils.exceptions import GitDiffError
from guardian.utils.git_diff import determine_diff_range, get_diff

load_dotenv()

# Exit codes
EXIT_SUCCESS = 0
EXIT_VIOLATIONS = 1
EXIT_ERROR = 2
EXIT_KEYBOARD_INTERRUPT = 130

NO_CHANGES_MESSAGE = "No changes found. Try specifying a range: guardian check HEAD~3..HEAD"


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--verbose", action="store_true", help="Print tracebacks on errors")

    parser = argparse.ArgumentParser(
        prog="guardian",
        description="Team agreements as code: rule checks and proposal voting",
    )
    subparsers = parser.add_subparsers(dest="command")

    check = subparsers.add_parser(
        "check",
        parents=[common],
        help="Check code changes against configured rules",
        description=(
            "Check code changes against configured rules. The diff range is taken "
            "from the argument, then CI variables (GitHub Actions, GitLab CI), "
            "then origin/main..HEAD. Exit codes: 0 passed, 1 violations, 2 error."
        ),
    )
    check.add_argument(
        "diff_range", nargs="?", default=None, help="Git range such as HEAD~3..HEAD"
    )
    check.add_argument("--json", action="store_true", help="Output results as JSON")
    check.add_argument(
        "--no-llm", action="store_true", help="Skip LLM explanations of violations"
    )

    tally = subparsers.add_parser(
        "tally",
        parents=[common],
        help="Show the voting tally for a proposal",
    )
    tally.add_argument("proposal_id", help="The ID of the proposal")
    tally.add_argument("--json", action="store_true", help="Output results as JSON")

    subparsers.add_parser(
        "validate",
        parents=[common],
        help="Validate every file in the .agreements/ store",
    )
    return parser


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


def check_report(result: EngineResult) -> dict:
    """Build the JSON-ready check report."""
    violations = []
    for violation in result.violations:
        entry = violation.model_dump()
        entry["llm_explanation"] = violation.llm_explanation or ""
        violations.append(entry)
    return {
        "violations": violations,
        "summary": {
            "errors": result.error_count,
            "warnings": result.warning_count,
            "passed": result.passed,
        },
    }


def print_check_report_human(result: EngineResult) -> None:
    print("Guardian Check Report")
    print("=====================")
    print()

    if not result.violations:
        print("No violations found.")
        print()
        print("Result: PASSED")
        return

    for violation in result.violations:
        label = "WARNING" if violation.severity == Severity.WARNING.value else "VIOLATION"
        print(f"{label} [{violation.severity}] {violation.rule_id}")
        print(f"  {violation.description}")
        if violation.file_path:
            print(f"  File: {violation.file_path}")
        if violation.diff_snippet:
            print("  Diff:")
            for line in violation.diff_snippet.split("\n"):
                print(f"    {line}")
        if violation.llm_explanation:
            print(f"  AI: {violation.llm_explanation}")
        print()

    status = "PASSED" if result.passed else "FAILED"
    print(
        f"Result: {result.error_count} error(s), "
        f"{result.warning_count} warning(s) - {status}"
    )


def tally_report(tally: TallyResult) -> dict:
    """Build the JSON-ready tally report."""
    return {
        "proposal_id": tally.proposal_id,
        "rule_id": tally.rule_id,
        "eligible_voters": list(tally.eligible_voters),
        "votes": [
            {"email": vote.voter_email, "decision": vote.decision, "comment": vote.comment}
            for vote in tally.votes
        ],
        "result": tally.quorum_result.result.value,
        "yes_count": tally.quorum_result.yes_votes,
        "no_count": tally.quorum_result.no_votes,
        "required": tally.quorum_result.required,
    }


def print_tally_report_human(tally: TallyResult) -> None:
    print("Guardian Tally Report")
    print("=====================")
    print()
    print(f"Proposal: {tally.proposal_id}")
    print(f"Rule:     {tally.rule_id}")
    print()

    print(f"Eligible voters ({len(tally.eligible_voters)}):")
    for voter in tally.eligible_voters:
        print(f"  - {voter}")
    print()

    print(f"Votes ({len(tally.votes)}):")
    if not tally.votes:
        print("  (no votes yet)")
    for vote in tally.votes:
        comment = f' - "{vote.comment}"' if vote.comment else ""
        print(f"  {vote.voter_email}: {vote.decision.upper()}{comment}")
    print()

    quorum = tally.quorum_result
    print(f"Yes: {quorum.yes_votes} / No: {quorum.no_votes} / Required: {quorum.required}")
    print(f"Result: {quorum.result.value}")


def _handle_error(label: str, exc: BaseException, verbose: bool, exit_code: int) -> int:
    """Print error message to stderr and return the exit code."""
    print(f"Error: {label}: {exc}", file=sys.stderr)
    if verbose:
        traceback.print_exc(file=sys.stderr)
    return exit_code


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _explain_violations(
    constitution: Constitution,
    rules_file: RulesFile,
    diff_content: str,
    violations: list[Violation],
    verbose: bool = False,
) -> None:
    """Attach LLM explanations in place; failures only produce a warning."""
    if not violations or not constitution.llm.provider:
        return

    # Lazy import: the SDK clients are only needed when an LLM is configured
    from guardian.agents.explainer import ViolationExplainer, is_cloud_provider

    if verbose and is_cloud_provider(constitution.llm.provider):
        print(
            f"Note: sending the diff to cloud provider {constitution.llm.provider!r} for analysis",
            file=sys.stderr,
        )

    try:
        explainer = ViolationExplainer(constitution.llm)
        explainer.enrich(diff_content, rules_file.rules, violations)
    except AgentError as exc:
        print(f"Warning: LLM analysis failed: {exc}", file=sys.stderr)


def run_check(args: argparse.Namespace) -> int:
    diff_range = determine_diff_range(args.diff_range)

    agreements_dir = find_agreements_dir()
    constitution = load_constitution(agreements_dir)
    rules_file = load_rules(agreements_dir)
    validate_rules(rules_file)
    exceptions = load_all_exceptions(agreements_dir)
    for exception in exceptions:
        validate_exception(exception)

    diff = get_diff(diff_range)
    if not diff.changed_files:
        print(NO_CHANGES_MESSAGE)
        return EXIT_SUCCESS

    engine = CheckEngine(
        rules_file.rules,
        exceptions,
        meta_checker=MetaChecker(agreements_dir / PROPOSALS_DIR, has_accepted_proposal),
    )
    result = engine.run(diff.changed_files, diff.diff_content)

    if not args.no_llm:
        _explain_violations(
            constitution, rules_file, diff.diff_content, result.violations, args.verbose
        )

    if args.json:
        print(json.dumps(check_report(result), indent=2))
    else:
        print_check_report_human(result)

    return EXIT_SUCCESS if result.passed else EXIT_VIOLATIONS


def run_tally(args: argparse.Namespace) -> int:
    agreements_dir = find_agreements_dir()
    constitution = load_constitution(agreements_dir)
    proposal, _ = find_proposal(agreements_dir, args.proposal_id)
    votes = load_votes_for_proposal(agreements_dir, args.proposal_id)

    tally = compute_tally(proposal, votes, constitution)

    if args.json:
        print(json.dumps(tally_report(tally), indent=2))
    else:
        print_tally_report_human(tally)
    return EXIT_SUCCESS


def run_validate(args: argparse.Namespace) -> int:
    agreements_dir = find_agreements_dir()
    failures = 0

    def _step(label: str, action) -> None:
        nonlocal failures
        try:
            action()
        except (AgreementsError, RuleEngineError) as exc:
            failures += 1
            _handle_error(label, exc, args.verbose, EXIT_ERROR)

    def _constitution() -> None:
        validate_constitution(load_constitution(agreements_dir))

    def _rules() -> None:
        rules_file = load_rules(agreements_dir)
        validate_rules(rules_file)
        CheckEngine(rules_file.rules).validate_rules()

    def _exceptions() -> None:
        for exception in load_all_exceptions(agreements_dir):
            validate_exception(exception)

    def _proposals() -> None:
        for proposal in load_all_proposals(agreements_dir):
            validate_proposal(proposal)

    def _votes() -> None:
        votes_dir = agreements_dir / VOTES_DIR
        if not votes_dir.is_dir():
            return
        for proposal_dir in sorted(p for p in votes_dir.iterdir() if p.is_dir()):
            for vote in load_votes_for_proposal(agreements_dir, proposal_dir.name):
                validate_vote(vote)

    _step("constitution", _constitution)
    _step("rules", _rules)
    _step("exceptions", _exceptions)
    _step("proposals", _proposals)
    _step("votes", _votes)

    if failures:
        return EXIT_ERROR
    print(f"All agreements in {agreements_dir} are valid.")
    return EXIT_SUCCESS


_COMMANDS = {
    "check": run_check,
    "tally": run_tally,
    "validate": run_validate,
}


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code integer.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    command = _COMMANDS.get(args.command)
    if command is None:
        parser.print_help(sys.stderr)
        return EXIT_ERROR

    try:
        return command(args)

    except AgreementsError as exc:
        return _handle_error("agreements", exc, args.verbose, EXIT_ERROR)

    except RuleEngineError as exc:
        return _handle_error("running checks", exc, args.verbose, EXIT_ERROR)

    except GitDiffError as exc:
        return _handle_error("getting diff", exc, args.verbose, EXIT_ERROR)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_KEYBOARD_INTERRUPT

    except Exception as exc:
        return _handle_error("unexpected error", exc, args.verbose, EXIT_ERROR)


if __name__ == "__main__":
    sys.exit(main())
