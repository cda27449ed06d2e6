"""Tests for the narrative composer and agenda timing."""

from __future__ import annotations

import pytest

from mindshare.models.brief import AgeBand, ClientProfile, Product, RiskBand, TopicKey
from mindshare.scoring.engine import detect_forbidden_phrases
from mindshare.synthetic.lexicon import DEFAULT_LEXICON
from mindshare.synthetic.narrative import NarrativeComposer, allocate_agenda_minutes
from mindshare.synthetic.rng import SeededRng

TOPICS = [TopicKey.RISK_TOLERANCE, TopicKey.TIME_HORIZON]


@pytest.fixture
def client() -> ClientProfile:
    return ClientProfile(
        age_band=AgeBand.AGE_51_65,
        dependents=1,
        risk=RiskBand.LOW,
        milestones=["retirement transition"],
    )


class TestAgendaTiming:
    """Fixed fractions of the meeting length with floors and a recap cap."""

    def test_fifteen_minutes_uses_floors(self) -> None:
        timing = allocate_agenda_minutes(15)
        assert (timing.recap, timing.discovery, timing.solution, timing.wrap_up) == (3, 5, 6, 4)

    def test_sixty_minutes_caps_recap(self) -> None:
        timing = allocate_agenda_minutes(60)
        assert (timing.recap, timing.discovery, timing.solution, timing.wrap_up) == (5, 21, 21, 12)


class TestMeetingBrief:
    """Generated-brief narrative."""

    def test_has_five_lines(self, client: ClientProfile) -> None:
        text = NarrativeComposer().compose_meeting_brief(
            SeededRng("n"), Product.ANNUITY, client, TOPICS, 30
        )
        lines = text.split("\n")
        assert len(lines) == 5
        assert lines[0].startswith("Agenda: ")
        assert lines[2].startswith("Suitability narrative: ")
        assert lines[4].startswith("Recordkeeping: ")

    def test_contains_product_and_topic_keys(self, client: ClientProfile) -> None:
        text = NarrativeComposer().compose_meeting_brief(
            SeededRng("n"), Product.ROLLOVER_401K, client, TOPICS, 60
        )
        assert "401k Rollover" in text
        for topic in TOPICS:
            assert topic.value in text

    def test_reports_client_profile(self, client: ClientProfile) -> None:
        text = NarrativeComposer().compose_meeting_brief(
            SeededRng("n"), Product.ANNUITY, client, TOPICS, 15
        )
        assert "retirement transition" in text
        assert "Risk comfort is low with 1 dependents." in text

    def test_same_seed_same_text(self, client: ClientProfile) -> None:
        composer = NarrativeComposer()
        first = composer.compose_meeting_brief(SeededRng("s"), Product.ANNUITY, client, TOPICS, 30)
        second = composer.compose_meeting_brief(SeededRng("s"), Product.ANNUITY, client, TOPICS, 30)
        assert first == second

    def test_generated_text_has_no_redlines(self, client: ClientProfile) -> None:
        """Flags only ever come from mistake injection."""
        composer = NarrativeComposer()
        for i in range(25):
            text = composer.compose_meeting_brief(
                SeededRng(f"clean-{i}"), Product.WHOLE_LIFE, client, TOPICS, 30
            )
            assert detect_forbidden_phrases(text) == []


class TestFormBrief:
    """Form-submitted narrative."""

    def test_embeds_objective(self, client: ClientProfile) -> None:
        text = NarrativeComposer().compose_form_brief(
            SeededRng("f"), "Fund a grandchild's tuition", Product.COLLEGE_SAVINGS, client, TOPICS, 30
        )
        assert "Objective: Fund a grandchild's tuition." in text
        assert "College Savings" in text
        assert len(text.split("\n")) == 5


class TestMistakeInjection:
    """Promissory sentence appended with the configured probability."""

    def test_always_inject(self) -> None:
        composer = NarrativeComposer(mistake_probability=1.0)
        text = composer.inject_mistake(SeededRng("m"), "Base text.")

        assert text.startswith("Base text.\nPromissory language noted: ")
        assert text.endswith(" returns discussed informally.")
        assert detect_forbidden_phrases(text)

    def test_never_inject(self) -> None:
        composer = NarrativeComposer(mistake_probability=0.0)
        assert composer.inject_mistake(SeededRng("m"), "Base text.") == "Base text."

    def test_injected_phrase_comes_from_lexicon(self) -> None:
        composer = NarrativeComposer(mistake_probability=1.0)
        text = composer.inject_mistake(SeededRng("p"), "x")
        assert any(f"noted: {phrase} returns" in text for phrase in DEFAULT_LEXICON.mistake_phrases)
