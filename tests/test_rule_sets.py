"""Tests for compliance rule set registry and validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from mindshare.errors import RuleSetNotFoundError
from mindshare.models.brief import TopicKey
from mindshare.scoring.rules import (
    EXTENDED_RULE_SET,
    MINDSHARE_RULE_SET_ENV,
    STANDARD_RULE_SET,
    RuleSet,
    available_rule_sets,
    get_rule_set,
    get_rule_set_from_env,
)


class TestRegistry:
    """Lookup of registered rule sets."""

    def test_available_rule_sets(self) -> None:
        assert available_rule_sets() == ["extended", "standard"]

    def test_lookup_is_case_insensitive(self) -> None:
        assert get_rule_set(" Extended ") is EXTENDED_RULE_SET

    def test_unknown_rule_set_fails_closed(self) -> None:
        with pytest.raises(RuleSetNotFoundError) as exc_info:
            get_rule_set("lenient")
        assert exc_info.value.details["available"] == ["extended", "standard"]

    def test_standard_has_five_phrases(self) -> None:
        assert STANDARD_RULE_SET.forbidden_phrases == (
            "guaranteed",
            "assured",
            "will outperform",
            "no-risk",
            "surefire",
        )

    def test_extended_keeps_standard_weights(self) -> None:
        assert len(EXTENDED_RULE_SET.forbidden_phrases) == 10
        assert EXTENDED_RULE_SET.weights == STANDARD_RULE_SET.weights


class TestEnvironmentSelection:
    """MINDSHARE_RULE_SET picks the active rule set."""

    def test_default_is_standard(self) -> None:
        assert get_rule_set_from_env() is STANDARD_RULE_SET

    def test_env_selects_extended(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(MINDSHARE_RULE_SET_ENV, "extended")
        assert get_rule_set_from_env() is EXTENDED_RULE_SET

    def test_env_unknown_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(MINDSHARE_RULE_SET_ENV, "bogus")
        with pytest.raises(RuleSetNotFoundError):
            get_rule_set_from_env()


class TestValidation:
    """RuleSet construction fails closed on incomplete configuration."""

    def _fields(self) -> dict[str, object]:
        return STANDARD_RULE_SET.model_dump()

    def test_weights_must_sum_to_one(self) -> None:
        fields = self._fields()
        weights = dict(STANDARD_RULE_SET.weights)
        weights[TopicKey.RECORDKEEPING] = 0.5
        fields["weights"] = weights
        with pytest.raises(ValidationError, match="sum to 1.0"):
            RuleSet(**fields)

    def test_weights_must_cover_all_topics(self) -> None:
        fields = self._fields()
        weights = dict(STANDARD_RULE_SET.weights)
        del weights[TopicKey.RECORDKEEPING]
        fields["weights"] = weights
        with pytest.raises(ValidationError, match="Weights missing topics"):
            RuleSet(**fields)

    def test_phrases_must_be_lowercase(self) -> None:
        fields = self._fields()
        fields["forbidden_phrases"] = ("Guaranteed",)
        with pytest.raises(ValidationError, match="lowercase"):
            RuleSet(**fields)

    def test_rule_set_is_frozen(self) -> None:
        with pytest.raises(ValidationError):
            STANDARD_RULE_SET.penalty_per_flag = 5  # type: ignore[misc]
