"""Compliance scorer.

Deterministic, rule-driven scoring of brief text:
1. Per-topic coverage (keyword evidence or explicit topic tag, binary)
2. Forbidden-phrase scan (case-insensitive substring)
3. compliance_iq = round(100 * sum(coverage_i * weight_i) / sum(weights) - penalty)
   with penalty = min(flags * penalty_per_flag, max_penalty), clamped to [0, 100]
4. Weak topics: coverage below threshold, plus suitability when IQ is low

The scorer never throws on well-typed input: empty text yields zero coverage.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from mindshare.errors import MindshareValidationError
from mindshare.models.brief import (
    ALL_TOPICS,
    Coverage,
    RedlineFlag,
    TopicKey,
    coerce_topics,
)
from mindshare.rounding import round_half_up
from mindshare.scoring.rules import STANDARD_RULE_SET, RuleSet


class ComplianceScore(BaseModel):
    """Scoring output for one piece of brief text."""

    model_config = ConfigDict(frozen=True)

    coverage: Coverage
    flags: list[RedlineFlag] = Field(default_factory=list)
    compliance_iq: int = Field(..., ge=0, le=100)
    weak_topics: list[TopicKey] = Field(default_factory=list)


class ComplianceScorer:
    """Scores brief text against an injected rule set."""

    def __init__(self, rule_set: RuleSet = STANDARD_RULE_SET) -> None:
        self._rule_set = rule_set

    @property
    def rule_set(self) -> RuleSet:
        return self._rule_set

    def compute_coverage(
        self, text: str, explicit_topics: Iterable[TopicKey | str] = ()
    ) -> Coverage:
        """Compute binary per-topic coverage.

        A topic scores 1 when the lowercased text contains any of its
        keywords or when it is explicitly tagged; otherwise 0.

        Raises:
            MindshareValidationError: If an explicit topic is outside the closed set.
        """
        tagged = set(coerce_topics(explicit_topics))
        normalized = text.lower()
        values: dict[TopicKey, float] = {}
        for topic in ALL_TOPICS:
            keywords = self._rule_set.topic_keywords[topic]
            has_keyword = any(keyword in normalized for keyword in keywords)
            values[topic] = 1.0 if has_keyword or topic in tagged else 0.0
        return Coverage.from_mapping(values)

    def detect_forbidden_phrases(self, text: str) -> list[str]:
        """Return every forbidden phrase present in the text, in rule order."""
        normalized = text.lower()
        return [phrase for phrase in self._rule_set.forbidden_phrases if phrase in normalized]

    def build_flags(self, phrases: Iterable[str]) -> list[RedlineFlag]:
        rules = self._rule_set
        return [
            RedlineFlag(
                text=phrase,
                reason=rules.phrase_reasons.get(phrase, rules.flag_reason),
                fix=rules.rewrite_suggestions.get(phrase, rules.default_fix),
            )
            for phrase in phrases
        ]

    def compliance_iq(self, coverage: Coverage, flag_count: int) -> int:
        """Weighted composite score in [0, 100].

        Raises:
            MindshareValidationError: If flag_count is negative.
        """
        if flag_count < 0:
            raise MindshareValidationError(
                "flag_count must be non-negative", details={"flag_count": flag_count}
            )
        rules = self._rule_set
        weight_sum = sum(rules.weights.values())
        weighted = sum(coverage.get(topic) * rules.weights[topic] for topic in ALL_TOPICS)
        base_score = (weighted / weight_sum) * 100.0
        penalty = min(flag_count * rules.penalty_per_flag, rules.max_penalty)
        return max(0, min(100, round_half_up(base_score - penalty)))

    def derive_weak_topics(self, coverage: Coverage, iq: int) -> list[TopicKey]:
        """Topics under the coverage threshold; suitability is forced in when IQ is low."""
        rules = self._rule_set
        weak = {topic for topic in ALL_TOPICS if coverage.get(topic) < rules.weak_coverage_threshold}
        if iq < rules.low_iq_threshold:
            weak.add(TopicKey.SUITABILITY_OBJECTIVE)
        return [topic for topic in ALL_TOPICS if topic in weak]

    def score(self, text: str, explicit_topics: Iterable[TopicKey | str] = ()) -> ComplianceScore:
        """Run the full scoring pipeline on one piece of text."""
        coverage = self.compute_coverage(text, explicit_topics)
        flags = self.build_flags(self.detect_forbidden_phrases(text))
        iq = self.compliance_iq(coverage, len(flags))
        return ComplianceScore(
            coverage=coverage,
            flags=flags,
            compliance_iq=iq,
            weak_topics=self.derive_weak_topics(coverage, iq),
        )


_DEFAULT_SCORER = ComplianceScorer()


def compute_coverage(text: str, explicit_topics: Iterable[TopicKey | str] = ()) -> Coverage:
    return _DEFAULT_SCORER.compute_coverage(text, explicit_topics)


def detect_forbidden_phrases(text: str) -> list[str]:
    return _DEFAULT_SCORER.detect_forbidden_phrases(text)


def compliance_iq(coverage: Coverage, flag_count: int) -> int:
    return _DEFAULT_SCORER.compliance_iq(coverage, flag_count)


def derive_weak_topics(coverage: Coverage, iq: int) -> list[TopicKey]:
    return _DEFAULT_SCORER.derive_weak_topics(coverage, iq)


def score_text(
    text: str,
    explicit_topics: Iterable[TopicKey | str] = (),
    rule_set: RuleSet | None = None,
) -> ComplianceScore:
    """Score text standalone, e.g. to re-score an edited brief.

    Args:
        text: Brief text to score.
        explicit_topics: Topics tagged on the brief regardless of wording.
        rule_set: Optional rule set; the canonical standard set when omitted.

    Returns:
        ComplianceScore with coverage, flags, compliance_iq and weak_topics.
    """
    scorer = _DEFAULT_SCORER if rule_set is None else ComplianceScorer(rule_set)
    return scorer.score(text, explicit_topics)
