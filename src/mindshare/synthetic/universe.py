"""Universe builder for deterministic synthetic advisor and brief datasets.

Orchestrates the seeded RNG, lexicon, narrative composer and compliance scorer
to produce:
- a full universe (advisor pool + N briefs) for a seed
- incremental briefs for the "add brief" flow
- a brief from user-entered form input

Every draw comes from a SeededRng keyed by the caller's seed, so identical
inputs reproduce identical ids, text, flags and scores. Timestamps come from
the injected clock.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mindshare.errors import MindshareValidationError
from mindshare.models.brief import (
    ALL_TOPICS,
    MEETING_LENGTHS,
    Advisor,
    AdvisorTenure,
    AgeBand,
    Brief,
    Channel,
    ClientProfile,
    Office,
    Product,
    RiskBand,
)
from mindshare.scoring.engine import ComplianceScorer
from mindshare.scoring.rules import RuleSet, get_rule_set_from_env
from mindshare.synthetic.lexicon import DEFAULT_LEXICON, Lexicon
from mindshare.synthetic.narrative import NarrativeComposer
from mindshare.synthetic.rng import SeededRng
from mindshare.training import TRAINING_MODULES, TrainingModule

logger = logging.getLogger(__name__)

MIN_ADVISOR_POOL = 25
BRIEFS_PER_ADVISOR = 6
OPTIONAL_TOPIC_PROBABILITY = 0.6
NEW_ADVISOR_PROBABILITY = 0.3
SUPERVISOR_COMMENT_PROBABILITY = 0.5
CREATED_AT_WINDOW_DAYS = 60
FORM_TOPIC_COUNT = 3


class ApprovalPolicy(BaseModel):
    """Auto-approval rule: threshold with an optional seeded coin flip below it."""

    model_config = ConfigDict(frozen=True)

    auto_approve_threshold: int = Field(..., ge=0, le=100)
    fallback_probability: float = Field(0.0, ge=0.0, le=1.0)


UNIVERSE_APPROVAL = ApprovalPolicy(auto_approve_threshold=72, fallback_probability=0.4)
INCREMENTAL_APPROVAL = ApprovalPolicy(auto_approve_threshold=75)
FORM_APPROVAL = ApprovalPolicy(auto_approve_threshold=78)


def decide_approval(iq: int, flag_count: int, rng: SeededRng, policy: ApprovalPolicy) -> bool:
    """Approve when IQ clears the threshold with no flags; otherwise flip the policy coin.

    The coin is only drawn when the policy has a non-zero fallback probability,
    so deterministic policies leave the RNG stream untouched.
    """
    if iq >= policy.auto_approve_threshold and flag_count == 0:
        return True
    if policy.fallback_probability <= 0.0:
        return False
    return rng.chance(policy.fallback_probability)


class BriefFormInput(BaseModel):
    """User-entered fields from the brief creation form."""

    office: Office
    product: Product
    advisor: Advisor
    risk: RiskBand
    age_band: AgeBand
    dependents: int = Field(..., ge=0, le=12)
    milestones: list[str] = Field(default_factory=list)
    objective: str = Field(..., min_length=1)
    channel: Channel
    time_available: int

    @field_validator("time_available")
    @classmethod
    def _validate_time_available(cls, value: int) -> int:
        if value not in MEETING_LENGTHS:
            raise ValueError(f"time_available must be one of {list(MEETING_LENGTHS)}")
        return value


class SyntheticUniverse(BaseModel):
    """A generated dataset."""

    seed: str
    advisors: list[Advisor]
    briefs: list[Brief]
    modules: list[TrainingModule] = Field(default_factory=lambda: list(TRAINING_MODULES))


class IncrementalBrief(BaseModel):
    """One incrementally generated brief plus any advisor minted for it."""

    brief: Brief
    new_advisors: list[Advisor] = Field(default_factory=list)


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _advisor_id(index: int) -> str:
    return f"adv-{index:03d}"


def _unique_advisors(briefs: Sequence[Brief]) -> list[Advisor]:
    """Advisors in first-appearance order; the latest snapshot of each wins."""
    by_id: dict[str, Advisor] = {}
    for brief in briefs:
        by_id[brief.advisor.id] = brief.advisor
    return list(by_id.values())


def _next_free_id(prefix: str, start: int, taken: set[str], width: int = 0) -> str:
    index = start
    while True:
        candidate = f"{prefix}{index:0{width}d}" if width else f"{prefix}{index}"
        if candidate not in taken:
            return candidate
        index += 1


class UniverseBuilder:
    """Builds synthetic datasets from injected lexicon, scorer and composer."""

    def __init__(
        self,
        lexicon: Lexicon = DEFAULT_LEXICON,
        scorer: ComplianceScorer | None = None,
        composer: NarrativeComposer | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._lexicon = lexicon
        self._scorer = scorer or ComplianceScorer()
        self._composer = composer or NarrativeComposer(lexicon)
        self._clock = clock

    @property
    def scorer(self) -> ComplianceScorer:
        return self._scorer

    def build(self, seed: str, count: int) -> SyntheticUniverse:
        """Generate an advisor pool and ``count`` briefs for a seed.

        Raises:
            MindshareValidationError: If count is not a positive integer.
        """
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise MindshareValidationError(
                "count must be a positive integer", details={"count": count}
            )

        rng = SeededRng(seed)
        now = self._clock()
        pool_size = max(MIN_ADVISOR_POOL, count // BRIEFS_PER_ADVISOR)
        advisors = [self._create_advisor(rng, _advisor_id(i + 1)) for i in range(pool_size)]

        briefs: list[Brief] = []
        for i in range(count):
            advisor = rng.pick_one(advisors)
            product = rng.pick_one(list(Product))
            client = self._generate_client(rng)
            minutes = rng.pick_one(MEETING_LENGTHS)
            topics = rng.pick_many(self._lexicon.primary_topics, 2)
            if rng.chance(OPTIONAL_TOPIC_PROBABILITY):
                optional = rng.pick_one(self._lexicon.secondary_topics)
                if optional not in topics:
                    topics.append(optional)

            text = self._composer.compose_meeting_brief(rng, product, client, topics, minutes)
            text = self._composer.inject_mistake(rng, text)
            score = self._scorer.score(text, topics)

            days_ago = rng.randint(0, CREATED_AT_WINDOW_DAYS)
            approved = decide_approval(
                score.compliance_iq, len(score.flags), rng, UNIVERSE_APPROVAL
            )
            channel = rng.pick_one(list(Channel))
            comment = None
            if not approved and rng.chance(SUPERVISOR_COMMENT_PROBABILITY):
                comment = rng.pick_one(self._lexicon.supervisor_comments)

            briefs.append(
                Brief(
                    id=f"brief-{i + 1}",
                    advisor=advisor,
                    office=advisor.office,
                    product=product,
                    client=client,
                    channel=channel,
                    time_available_min=minutes,
                    brief_text=text,
                    topics=topics,
                    flags=score.flags,
                    coverage=score.coverage,
                    compliance_iq=score.compliance_iq,
                    weak_topics=score.weak_topics,
                    created_at=(now - timedelta(days=days_ago)).isoformat(),
                    approved=approved,
                    supervisor_comment=comment,
                )
            )

        logger.info(
            "Built synthetic universe seed=%s briefs=%d advisors=%d rule_set=%s",
            seed,
            len(briefs),
            len(advisors),
            self._scorer.rule_set.name,
        )
        return SyntheticUniverse(seed=str(seed), advisors=advisors, briefs=briefs)

    def add_incremental_brief(
        self,
        seed: str,
        base_count: int,
        existing: Sequence[Brief],
        roster: Sequence[Advisor] = (),
    ) -> IncrementalBrief:
        """Generate one more brief whose RNG is keyed by seed and existing count.

        Args:
            seed: Universe seed.
            base_count: Size of the originally generated universe.
            existing: All briefs generated so far (base + added).
            roster: Known advisors without briefs, consulted only to keep minted
                advisor ids unique.

        Returns:
            IncrementalBrief with the brief and any newly minted advisor.
        """
        if base_count < 0:
            raise MindshareValidationError(
                "base_count must be non-negative", details={"base_count": base_count}
            )

        rng = SeededRng(f"{seed}-{base_count + len(existing)}")
        known = _unique_advisors(existing)
        new_advisors: list[Advisor] = []
        if rng.chance(NEW_ADVISOR_PROBABILITY) or not known:
            taken = {a.id for a in known} | {a.id for a in roster}
            advisor_id = _next_free_id("adv-", base_count + len(known) + 1, taken, width=3)
            advisor = self._create_advisor(rng, advisor_id)
            new_advisors.append(advisor)
        else:
            advisor = rng.pick_one(known)

        product = rng.pick_one(list(Product))
        client = self._generate_client(rng)
        minutes = rng.pick_one(MEETING_LENGTHS)
        topics = rng.pick_many(ALL_TOPICS, rng.randint(2, 3))
        text = self._composer.compose_meeting_brief(rng, product, client, topics, minutes)
        text = self._composer.inject_mistake(rng, text)
        score = self._scorer.score(text, topics)
        approved = decide_approval(
            score.compliance_iq, len(score.flags), rng, INCREMENTAL_APPROVAL
        )

        brief = Brief(
            id=_next_free_id("brief-", len(existing) + 1, {b.id for b in existing}),
            advisor=advisor,
            office=advisor.office,
            product=product,
            client=client,
            channel=rng.pick_one(list(Channel)),
            time_available_min=minutes,
            brief_text=text,
            topics=topics,
            flags=score.flags,
            coverage=score.coverage,
            compliance_iq=score.compliance_iq,
            weak_topics=score.weak_topics,
            created_at=self._clock().isoformat(),
            approved=approved,
        )
        logger.debug("Generated incremental brief %s for advisor %s", brief.id, advisor.id)
        return IncrementalBrief(brief=brief, new_advisors=new_advisors)

    def add_briefs(
        self,
        seed: str,
        base_count: int,
        existing: Sequence[Brief],
        n: int,
        roster: Sequence[Advisor] = (),
    ) -> list[Brief]:
        """Generate ``n`` incremental briefs; each call sees the previous ones."""
        if n < 0:
            raise MindshareValidationError("n must be non-negative", details={"n": n})
        generated: list[Brief] = []
        minted: list[Advisor] = []
        for _ in range(n):
            result = self.add_incremental_brief(
                seed, base_count, [*existing, *generated], [*roster, *minted]
            )
            generated.append(result.brief)
            minted.extend(result.new_advisors)
        logger.info("Added %d briefs (new advisors: %d)", len(generated), len(minted))
        return generated

    def create_brief_from_form(
        self, seed: str, form: BriefFormInput, existing: Sequence[Brief]
    ) -> Brief:
        """Build a brief from user-entered client, product and advisor fields."""
        rng = SeededRng(f"{seed}-{len(existing) + 1}-{form.advisor.id}")
        milestones = form.milestones or rng.pick_many(self._lexicon.milestones, 1)
        client = ClientProfile(
            age_band=form.age_band,
            dependents=form.dependents,
            risk=form.risk,
            milestones=milestones,
        )
        topics = rng.pick_many(ALL_TOPICS, FORM_TOPIC_COUNT)
        text = self._composer.compose_form_brief(
            rng, form.objective, form.product, client, topics, form.time_available
        )
        text = self._composer.inject_mistake(rng, text)
        score = self._scorer.score(text, topics)

        brief = Brief(
            id=_next_free_id("brief-", len(existing) + 1, {b.id for b in existing}),
            advisor=form.advisor,
            office=form.office,
            product=form.product,
            client=client,
            channel=form.channel,
            time_available_min=form.time_available,
            brief_text=text,
            topics=topics,
            flags=score.flags,
            coverage=score.coverage,
            compliance_iq=score.compliance_iq,
            weak_topics=score.weak_topics,
            created_at=self._clock().isoformat(),
            approved=decide_approval(score.compliance_iq, len(score.flags), rng, FORM_APPROVAL),
        )
        logger.info("Created brief %s from form for advisor %s", brief.id, form.advisor.id)
        return brief

    def _create_advisor(self, rng: SeededRng, advisor_id: str) -> Advisor:
        name = f"{rng.pick_one(self._lexicon.first_names)} {rng.pick_one(self._lexicon.last_names)}"
        office = rng.pick_one(list(Office))
        tenure = rng.pick_one(list(AdvisorTenure))
        return Advisor(id=advisor_id, name=name, office=office, tenure=tenure)

    def _generate_client(self, rng: SeededRng) -> ClientProfile:
        age_band = rng.pick_one(list(AgeBand))
        dependents = rng.randint(0, 4)
        risk = rng.pick_one(list(RiskBand))
        milestones = rng.pick_many(self._lexicon.milestones, rng.randint(1, 2))
        return ClientProfile(age_band=age_band, dependents=dependents, risk=risk, milestones=milestones)


def _default_builder(rule_set: RuleSet | None = None) -> UniverseBuilder:
    return UniverseBuilder(scorer=ComplianceScorer(rule_set or get_rule_set_from_env()))


def generate_universe(seed: str, count: int, rule_set: RuleSet | None = None) -> SyntheticUniverse:
    """Generate a full advisor/brief universe for a seed."""
    return _default_builder(rule_set).build(seed, count)


def add_briefs(
    seed: str,
    base_count: int,
    existing: Sequence[Brief],
    n: int,
    roster: Sequence[Advisor] = (),
    rule_set: RuleSet | None = None,
) -> list[Brief]:
    """Generate ``n`` additional briefs on top of ``existing``.

    Pass the universe's advisor roster so minted advisors never reuse the id
    of a pool advisor that has no briefs yet.
    """
    return _default_builder(rule_set).add_briefs(seed, base_count, existing, n, roster=roster)


def create_brief_from_form(
    seed: str,
    form: BriefFormInput,
    existing: Sequence[Brief],
    rule_set: RuleSet | None = None,
) -> Brief:
    """Build a brief from user-entered form fields."""
    return _default_builder(rule_set).create_brief_from_form(seed, form, existing)