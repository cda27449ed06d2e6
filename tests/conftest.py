"""Pytest configuration and fixtures for Mindshare tests."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import UTC, datetime

import pytest

from mindshare.models.brief import (
    Advisor,
    AdvisorTenure,
    AgeBand,
    Brief,
    Channel,
    ClientProfile,
    Office,
    Product,
    RiskBand,
    TopicKey,
)
from mindshare.scoring.engine import ComplianceScorer

FIXED_NOW = datetime(2025, 3, 14, 12, 0, 0, tzinfo=UTC)

MINDSHARE_ENV_VARS = (
    "MINDSHARE_RULE_SET",
    "MINDSHARE_DEFAULT_SEED",
    "MINDSHARE_BASE_COUNT",
    "MINDSHARE_OTEL_ENABLED",
    "MINDSHARE_REQUIRE_OTEL",
    "MINDSHARE_OTEL_TEST_CAPTURE",
)


@pytest.fixture(autouse=True)
def clear_mindshare_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test against default configuration."""
    for name in MINDSHARE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Reference clock so created_at values are reproducible."""
    return lambda: FIXED_NOW


@pytest.fixture
def advisor() -> Advisor:
    return Advisor(
        id="adv-900",
        name="Jordan Patel",
        tenure=AdvisorTenure.NOVICE,
        office=Office.MIDWEST,
    )


@pytest.fixture
def brief_factory(advisor: Advisor) -> Callable[..., Brief]:
    """Build a scored brief from text so tests control coverage and flags exactly."""
    scorer = ComplianceScorer()

    def _make(
        brief_id: str,
        text: str,
        topics: Iterable[TopicKey] = (),
        advisor_override: Advisor | None = None,
        office: Office = Office.MIDWEST,
        product: Product = Product.ANNUITY,
        risk: RiskBand = RiskBand.MODERATE,
        approved: bool = False,
    ) -> Brief:
        topic_list = list(topics)
        score = scorer.score(text, topic_list)
        owner = advisor_override or advisor
        return Brief(
            id=brief_id,
            advisor=owner,
            office=office,
            product=product,
            client=ClientProfile(
                age_band=AgeBand.AGE_36_50,
                dependents=2,
                risk=risk,
                milestones=["college planning"],
            ),
            channel=Channel.VIRTUAL,
            time_available_min=30,
            brief_text=text,
            topics=topic_list,
            flags=score.flags,
            coverage=score.coverage,
            compliance_iq=score.compliance_iq,
            weak_topics=score.weak_topics,
            created_at=FIXED_NOW.isoformat(),
            approved=approved,
        )

    return _make
