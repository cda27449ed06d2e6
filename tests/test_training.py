"""Tests for the micro-lesson training catalog."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from mindshare.errors import MindshareValidationError
from mindshare.models.brief import ALL_TOPICS, TopicKey
from mindshare.training import TRAINING_MODULES, TrainingModule, get_training_module


def test_one_module_per_topic() -> None:
    """Every compliance topic has exactly one lesson."""
    assert sorted(m.topic for m in TRAINING_MODULES) == sorted(ALL_TOPICS)


def test_module_ids_unique() -> None:
    ids = [m.id for m in TRAINING_MODULES]
    assert len(ids) == len(set(ids))


def test_get_training_module_by_string() -> None:
    module = get_training_module("liquidity_needs")
    assert module.id == "mod-liquidity"
    assert module.topic is TopicKey.LIQUIDITY_NEEDS


def test_answer_index_points_at_a_choice() -> None:
    for module in TRAINING_MODULES:
        assert 0 <= module.answer_index < len(module.scenario_choices)


def test_unknown_topic_raises() -> None:
    with pytest.raises(MindshareValidationError):
        get_training_module("tax_planning")


def test_answer_index_out_of_range_rejected() -> None:
    with pytest.raises(ValidationError):
        TrainingModule(
            id="mod-x",
            topic=TopicKey.RECORDKEEPING,
            title="X",
            duration_min=3,
            url="/training/x",
            bullets=("a",),
            scenario_question="?",
            scenario_choices=("yes", "no"),
            answer_index=2,
        )
