"""Mindshare compliance scoring.

Converts brief text plus explicit topic tags into:
- 6 binary coverage dimensions
- redline flags for promissory language
- 1 composite compliance IQ (weighted, penalised per flag)
- the weak-topic list
"""

from mindshare.scoring.engine import (
    ComplianceScore,
    ComplianceScorer,
    compliance_iq,
    compute_coverage,
    derive_weak_topics,
    detect_forbidden_phrases,
    score_text,
)
from mindshare.scoring.rules import (
    EXTENDED_RULE_SET,
    STANDARD_RULE_SET,
    RuleSet,
    available_rule_sets,
    get_rule_set,
    get_rule_set_from_env,
)

__all__ = [
    "EXTENDED_RULE_SET",
    "STANDARD_RULE_SET",
    "ComplianceScore",
    "ComplianceScorer",
    "RuleSet",
    "available_rule_sets",
    "compliance_iq",
    "compute_coverage",
    "derive_weak_topics",
    "detect_forbidden_phrases",
    "get_rule_set",
    "get_rule_set_from_env",
    "score_text",
]
