"""LLM agent that explains rule violations in plain language."""

import os
import re
from typing import Any

from anthropic import Anthropic
import openai

from guardian.agents.exceptions import ExplanationError
from guardian.models.agreement_models import LLMConfig, Rule
from guardian.models.report_models import Violation

API_KEY_ENV_VAR = "GUARDIAN_LLM_API_KEY"

PROVIDER_DEEPSEEK = "deepseek"
PROVIDER_OPENAI = "openai"
PROVIDER_CLAUDE = "claude"
PROVIDER_CUSTOM = "custom"

PROVIDER_ENDPOINTS = {
    PROVIDER_DEEPSEEK: "https://api.deepseek.com/v1",
    PROVIDER_OPENAI: "https://api.openai.com/v1",
}

DEFAULT_MODELS = {
    PROVIDER_DEEPSEEK: "deepseek-chat",
    PROVIDER_OPENAI: "gpt-4o",
    PROVIDER_CLAUDE: "claude-sonnet-4-5-20250929",
}

MAX_TOKENS = 2048
MAX_DIFF_IN_PROMPT = 20000

DEFAULT_CHECK_SYSTEM_PROMPT = """You are a code review assistant for the Guardian constitutional engine.
You analyze git diffs against team rules and provide explanations for violations.

Given:
- A git diff
- A set of team rules with their descriptions
- Violations detected by regex-based checkers

Your job:
1. Explain each violation in plain language
2. Suggest how to fix the violation
3. Note any false positives you detect
4. Provide additional context about why the rule exists

Be concise. Focus on actionable advice. Start each explanation on its own line \
with the rule id in square brackets, for example: [rule_id] explanation."""

# "[rule_id] explanation" at the start of a line
_EXPLANATION_LINE = re.compile(r"^\[([^\]]+)\]\s*(.+)$")


def is_cloud_provider(provider: str) -> bool:
    """True for providers that send diffs to an external API."""
    return provider in (PROVIDER_DEEPSEEK, PROVIDER_OPENAI, PROVIDER_CLAUDE)


def get_check_prompt(override: str = "") -> str:
    return override or DEFAULT_CHECK_SYSTEM_PROMPT


def parse_explanations(response_text: str, violations: list[Violation]) -> dict[str, str]:
    """Map rule ids to explanations from a "[rule_id] text" style response.

    When the model ignores the format, the whole response is attached to
    every violated rule.
    """
    if not violations:
        return {}

    known_ids = {violation.rule_id for violation in violations}
    explanations: dict[str, str] = {}
    for line in response_text.splitlines():
        match = _EXPLANATION_LINE.match(line.strip())
        if match is None:
            continue
        rule_id, text = match.group(1).strip(), match.group(2).strip()
        if rule_id not in known_ids:
            continue
        if rule_id in explanations:
            explanations[rule_id] += " " + text
        else:
            explanations[rule_id] = text

    if not explanations:
        text = response_text.strip()
        if text:
            explanations = {rule_id: text for rule_id in known_ids}
    return explanations


class ViolationExplainer:
    """Asks the configured LLM provider to explain check violations.

    Provider ``claude`` is served by the Anthropic SDK; ``openai``,
    ``deepseek`` and ``custom`` go through the OpenAI SDK pointed at the
    provider's base URL.
    """

    def __init__(self, llm_config: LLMConfig, api_key: str | None = None):
        """Initialize the explainer.

        Args:
            llm_config: The ``llm`` section of the constitution
            api_key: API key (falls back to GUARDIAN_LLM_API_KEY env var)

        Raises:
            ExplanationError: If the provider is unknown or misconfigured, or
                no API key is found
        """
        provider = llm_config.provider
        if provider not in (PROVIDER_DEEPSEEK, PROVIDER_OPENAI, PROVIDER_CLAUDE, PROVIDER_CUSTOM):
            raise ExplanationError(f"unsupported LLM provider: {provider!r}")

        self.api_key: str | None = api_key or os.getenv(API_KEY_ENV_VAR)
        if not self.api_key:
            raise ExplanationError(
                f"No LLM API key found. Set the {API_KEY_ENV_VAR} environment variable."
            )

        self.provider = provider
        self.endpoint = llm_config.endpoint or PROVIDER_ENDPOINTS.get(provider, "")
        if provider == PROVIDER_CUSTOM and not self.endpoint:
            raise ExplanationError("no endpoint configured for custom LLM provider")
        self.model = llm_config.model or DEFAULT_MODELS.get(provider, "")
        if not self.model:
            raise ExplanationError(f"no model configured for LLM provider {provider!r}")
        self.system_prompt = get_check_prompt(llm_config.prompts.check_system)

        self._anthropic_client: Anthropic | None = None
        self._openai_client: openai.OpenAI | None = None
        if provider == PROVIDER_CLAUDE:
            if llm_config.endpoint:
                self._anthropic_client = Anthropic(api_key=self.api_key, base_url=llm_config.endpoint)
            else:
                self._anthropic_client = Anthropic(api_key=self.api_key)
        else:
            self._openai_client = openai.OpenAI(api_key=self.api_key, base_url=self.endpoint)

    def _build_prompt(
        self,
        diff_content: str,
        rules: list[Rule],
        violations: list[Violation],
    ) -> str:
        rules_summary = "\n".join(
            f"- {rule.id} ({rule.severity}): {rule.description}" for rule in rules
        )
        violations_summary = ""
        for i, violation in enumerate(violations, 1):
            violations_summary += (
                f"\n{i}. [{violation.rule_id}] {violation.severity}: {violation.description}\n"
                f"   File: {violation.file_path}\n"
            )
            if violation.diff_snippet:
                violations_summary += f"   Line: {violation.diff_snippet}\n"

        diff_excerpt = diff_content[:MAX_DIFF_IN_PROMPT]
        if len(diff_content) > MAX_DIFF_IN_PROMPT:
            diff_excerpt += "\n... (diff truncated)"

        return f"""Team rules:
{rules_summary or "(none)"}

Violations found:
{violations_summary or "(none)"}

Git diff:
{diff_excerpt}
"""

    def _complete(self, prompt: str) -> str:
        if self._anthropic_client is not None:
            response = self._anthropic_client.messages.create(
                model=self.model,
                max_tokens=MAX_TOKENS,
                system=self.system_prompt,
                messages=[{"role": "user", "content": prompt}],
            )
            texts = [
                block.text for block in response.content
                if getattr(block, "type", "text") == "text"
            ]
            if not texts:
                raise ExplanationError("empty response from Claude")
            return "\n".join(texts)

        response = self._openai_client.chat.completions.create(
            model=self.model,
            max_tokens=MAX_TOKENS,
            messages=[
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": prompt},
            ],
        )
        if not response.choices:
            raise ExplanationError("no choices in LLM response")
        content: Any = response.choices[0].message.content
        if not content:
            raise ExplanationError("empty message in LLM response")
        return content

    def explain(
        self,
        diff_content: str,
        rules: list[Rule],
        violations: list[Violation],
    ) -> dict[str, str]:
        """Return explanations keyed by rule id.

        Raises:
            ExplanationError: If the provider call fails or returns nothing usable
        """
        if not violations:
            return {}

        prompt = self._build_prompt(diff_content, rules, violations)
        try:
            text = self._complete(prompt)
        except ExplanationError:
            raise
        except Exception as error:
            raise ExplanationError(f"LLM request failed: {error}") from error

        return parse_explanations(text, violations)

    def enrich(
        self,
        diff_content: str,
        rules: list[Rule],
        violations: list[Violation],
    ) -> list[Violation]:
        """Set ``llm_explanation`` on each violation whose rule was explained."""
        explanations = self.explain(diff_content, rules, violations)
        for violation in violations:
            explanation = explanations.get(violation.rule_id)
            if explanation:
                violation.llm_explanation = explanation
        return violations
