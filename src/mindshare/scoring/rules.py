"""Compliance rule sets.

A rule set is the immutable configuration the scorer runs against: topic
keyword dictionaries, dimension weights, the forbidden-phrase list with
suggested rewrites, and the penalty/weak-topic thresholds.

Two rule sets are registered:
- standard: canonical five-phrase list (default)
- extended: same weights and keywords with the longer ten-phrase list

Fail-closed: unknown rule set names raise RuleSetNotFoundError.
"""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel, ConfigDict, Field, model_validator

from mindshare.errors import RuleSetNotFoundError
from mindshare.models.brief import ALL_TOPICS, TopicKey

logger = logging.getLogger(__name__)

MINDSHARE_RULE_SET_ENV = "MINDSHARE_RULE_SET"
DEFAULT_RULE_SET_NAME = "standard"

_WEIGHT_SUM_TOLERANCE = 1e-9


class RuleSet(BaseModel):
    """Scoring configuration. All fields are immutable after construction."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    topic_keywords: dict[TopicKey, tuple[str, ...]] = Field(
        ..., description="Lowercase keywords that evidence each topic"
    )
    weights: dict[TopicKey, float] = Field(
        ..., description="Dimension weights (must cover all 6, sum to 1.0)"
    )
    forbidden_phrases: tuple[str, ...] = Field(..., description="Promissory phrases to redline")
    rewrite_suggestions: dict[str, str] = Field(default_factory=dict)
    phrase_reasons: dict[str, str] = Field(
        default_factory=dict, description="Per-phrase rationale; flag_reason otherwise"
    )
    flag_reason: str = "Promissory language detected"
    default_fix: str = "Rephrase using neutral, compliance-reviewed language."
    penalty_per_flag: int = Field(2, ge=0)
    max_penalty: int = Field(10, ge=0)
    weak_coverage_threshold: float = Field(0.6, ge=0.0, le=1.0)
    low_iq_threshold: int = Field(70, ge=0, le=100)

    @model_validator(mode="after")
    def _validate_rules(self) -> RuleSet:
        """Fail closed: weights and keywords must cover all 6 topics."""
        missing_weights = set(ALL_TOPICS) - set(self.weights)
        if missing_weights:
            raise ValueError(f"Weights missing topics: {sorted(t.value for t in missing_weights)}")
        weight_sum = sum(self.weights.values())
        if abs(weight_sum - 1.0) > _WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Weights must sum to 1.0 (got {weight_sum:.10f})")
        missing_keywords = set(ALL_TOPICS) - set(self.topic_keywords)
        if missing_keywords:
            raise ValueError(
                f"Keywords missing topics: {sorted(t.value for t in missing_keywords)}"
            )
        if any(p != p.lower() for p in self.forbidden_phrases):
            raise ValueError("Forbidden phrases must be lowercase")
        return self


_TOPIC_KEYWORDS: dict[TopicKey, tuple[str, ...]] = {
    TopicKey.SUITABILITY_OBJECTIVE: ("objective", "recommendation", "goal", "purpose", "align"),
    TopicKey.RISK_TOLERANCE: ("risk", "comfort", "volatility", "tolerance", "drawdown"),
    TopicKey.LIQUIDITY_NEEDS: ("liquidity", "cash", "emergency", "reserve", "access"),
    TopicKey.TIME_HORIZON: ("horizon", "timeline", "years", "milestone", "long-term"),
    TopicKey.CONFLICT_DISCLOSURE: (
        "conflict",
        "disclosure",
        "compensation",
        "best interest",
        "reg bi",
    ),
    TopicKey.RECORDKEEPING: ("document", "log", "crm", "audit", "record"),
}

_WEIGHTS: dict[TopicKey, float] = {
    TopicKey.SUITABILITY_OBJECTIVE: 0.18,
    TopicKey.RISK_TOLERANCE: 0.18,
    TopicKey.LIQUIDITY_NEEDS: 0.14,
    TopicKey.TIME_HORIZON: 0.14,
    TopicKey.CONFLICT_DISCLOSURE: 0.18,
    TopicKey.RECORDKEEPING: 0.18,
}

_STANDARD_PHRASES: tuple[str, ...] = (
    "guaranteed",
    "assured",
    "will outperform",
    "no-risk",
    "surefire",
)

_EXTENDED_PHRASES: tuple[str, ...] = _STANDARD_PHRASES + (
    "can't lose",
    "always profitable",
    "zero risk",
    "guaranteed returns",
    "risk-free",
)

_REWRITES: dict[str, str] = {
    "guaranteed": "Use language like 'designed to' instead of guarantee claims.",
    "assured": "Rephrase as 'positioned to' or 'expected to'.",
    "will outperform": "Describe disciplined approach rather than performance promises.",
    "no-risk": "Clarify protections without stating zero risk.",
    "surefire": "Reference guardrails and supervision instead of certainty.",
}

# Extended set: each phrase carries its own rationale and replacement wording.
_EXTENDED_REASONS: dict[str, str] = {
    "guaranteed": "Implies certainty where none exists; violates suitability standards",
    "assured": "Overpromises outcomes; creates unrealistic client expectations",
    "will outperform": "Makes performance predictions; prohibited by compliance policy",
    "no-risk": "Misrepresents product risk profile; all investments carry risk",
    "surefire": "Guarantees success; creates liability and client disappointment",
    "can't lose": "False promise; even conservative products have risk factors",
    "always profitable": "Impossible guarantee; violates truth in advertising",
    "zero risk": "Misrepresents fundamental investment principles",
    "guaranteed returns": (
        "Only acceptable if referring to contractual guarantees in specific products"
    ),
    "risk-free": "No product is entirely risk-free; misleading to clients",
}

_EXTENDED_FIXES: dict[str, str] = {
    "guaranteed": "designed to provide",
    "assured": "intended to help achieve",
    "will outperform": "has historically performed competitively",
    "no-risk": "designed to help manage risk",
    "surefire": "carefully structured to support",
    "can't lose": "designed with safeguards to help protect",
    "always profitable": "structured to pursue growth opportunities",
    "zero risk": "designed to help mitigate market volatility",
    "guaranteed returns": "potential for returns",
    "risk-free": "designed to help mitigate risk",
}


STANDARD_RULE_SET = RuleSet(
    name="standard",
    topic_keywords=_TOPIC_KEYWORDS,
    weights=_WEIGHTS,
    forbidden_phrases=_STANDARD_PHRASES,
    rewrite_suggestions=_REWRITES,
)

EXTENDED_RULE_SET = STANDARD_RULE_SET.model_copy(
    update={
        "name": "extended",
        "forbidden_phrases": _EXTENDED_PHRASES,
        "rewrite_suggestions": _EXTENDED_FIXES,
        "phrase_reasons": _EXTENDED_REASONS,
    }
)

_RULE_SETS: dict[str, RuleSet] = {
    STANDARD_RULE_SET.name: STANDARD_RULE_SET,
    EXTENDED_RULE_SET.name: EXTENDED_RULE_SET,
}


def available_rule_sets() -> list[str]:
    return sorted(_RULE_SETS)


def get_rule_set(name: str) -> RuleSet:
    """Retrieve a registered rule set. Fail-closed.

    Args:
        name: Rule set name (e.g. "standard").

    Returns:
        The immutable RuleSet.

    Raises:
        RuleSetNotFoundError: If no rule set is registered under the name.
    """
    rule_set = _RULE_SETS.get(name.strip().lower())
    if rule_set is None:
        raise RuleSetNotFoundError(
            f"No rule set defined with name: {name!r}",
            details={"available": available_rule_sets()},
        )
    return rule_set


def get_rule_set_from_env() -> RuleSet:
    """Resolve the rule set selected by MINDSHARE_RULE_SET (default: standard)."""
    name = os.environ.get(MINDSHARE_RULE_SET_ENV, "").strip() or DEFAULT_RULE_SET_NAME
    rule_set = get_rule_set(name)
    logger.debug("Using rule set %s", rule_set.name)
    return rule_set
