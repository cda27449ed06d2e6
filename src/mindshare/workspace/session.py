"""In-memory supervisor workspace.

Holds one session's dataset (advisors, briefs, lesson assignments and
completions) and applies supervisor actions to it. Briefs are frozen records;
every action replaces the affected briefs with updated copies.

Environment Variables:
    MINDSHARE_DEFAULT_SEED: Seed used when none is given (default: "mindshare-demo-seed")
    MINDSHARE_BASE_COUNT: Universe size used when none is given (default: 220)
"""

from __future__ import annotations

import logging
import os
from collections import Counter
from collections.abc import Callable
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from mindshare.errors import AdvisorNotFoundError, BriefNotFoundError, MindshareValidationError
from mindshare.graph.similarity import DEFAULT_NEIGHBOR_COUNT, build_similarity_graph
from mindshare.models.brief import Advisor, Brief, TopicKey, coerce_topic
from mindshare.models.graph import ClusterMode, SimilarityGraph
from mindshare.rounding import round_half_up
from mindshare.scoring.engine import ComplianceScorer
from mindshare.scoring.rules import get_rule_set_from_env
from mindshare.synthetic.universe import BriefFormInput, UniverseBuilder
from mindshare.training import TRAINING_MODULES, TrainingModule
from mindshare.workspace.filters import DEFAULT_FILTERS, BriefFilters

logger = logging.getLogger(__name__)

MINDSHARE_DEFAULT_SEED_ENV = "MINDSHARE_DEFAULT_SEED"
MINDSHARE_BASE_COUNT_ENV = "MINDSHARE_BASE_COUNT"
DEFAULT_SEED = "mindshare-demo-seed"
DEFAULT_BASE_COUNT = 220

LESSON_COVERAGE_BOOST = 0.1
AUDIT_TOP_N = 5
AUDIT_SAMPLE_REDLINES = 5
MIN_LOW_PERFORMERS = 3
LOW_PERFORMER_FRACTION = 0.1


def get_default_seed() -> str:
    """Seed from MINDSHARE_DEFAULT_SEED, falling back to the demo seed."""
    return os.environ.get(MINDSHARE_DEFAULT_SEED_ENV, "").strip() or DEFAULT_SEED


def get_default_base_count() -> int:
    """Universe size from MINDSHARE_BASE_COUNT (default 220).

    Raises:
        MindshareValidationError: If the variable is set but not a positive integer.
    """
    raw = os.environ.get(MINDSHARE_BASE_COUNT_ENV, "").strip()
    if not raw:
        return DEFAULT_BASE_COUNT
    try:
        value = int(raw)
    except ValueError as exc:
        raise MindshareValidationError(
            f"{MINDSHARE_BASE_COUNT_ENV} must be an integer", details={"value": raw}
        ) from exc
    if value <= 0:
        raise MindshareValidationError(
            f"{MINDSHARE_BASE_COUNT_ENV} must be positive", details={"value": value}
        )
    return value


def _round_to(value: float, places: int) -> float:
    scale = 10**places
    return round_half_up(value * scale) / scale


class LessonAssignment(BaseModel):
    model_config = ConfigDict(frozen=True)

    advisor_id: str
    topic: TopicKey


class LessonCompletion(BaseModel):
    model_config = ConfigDict(frozen=True)

    advisor_id: str
    topic: TopicKey
    completed_at: str


class MindshareStats(BaseModel):
    """Headline numbers for the currently visible briefs."""

    average_iq: int
    briefs_visible: int
    top_weak_topic: TopicKey | None
    flags_per_brief: float


class WorkspaceInsights(BaseModel):
    """Session-wide supervision metrics (ignores filters)."""

    lesson_completion_rate: int = Field(..., description="Completed / assigned, percent")
    redline_rate: float
    average_flags: float
    supervisor_pending: int


class LowPerformer(BaseModel):
    advisor: str
    office: str
    iq: int


class SampleRedline(BaseModel):
    advisor: str
    before: str
    after: str


class LessonCounts(BaseModel):
    assigned: int
    completed: int


class AuditSnapshot(BaseModel):
    """Point-in-time audit bundle for the visible briefs."""

    generated_at: str
    filters: BriefFilters
    top_topics: list[TopicKey]
    top_weak_topics: list[TopicKey]
    low_performers: list[LowPerformer]
    micro_lesson_counts: LessonCounts
    sample_redlines: list[SampleRedline]


class MindshareWorkspace:
    """One user's session over a synthetic dataset.

    Not thread-safe and not persisted; create one per session.
    """

    def __init__(
        self,
        seed: str | None = None,
        base_count: int | None = None,
        builder: UniverseBuilder | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._clock = clock or (lambda: datetime.now(UTC))
        self._builder = builder or UniverseBuilder(
            scorer=ComplianceScorer(get_rule_set_from_env()), clock=self._clock
        )
        self._scorer = self._builder.scorer
        self.base_count = base_count if base_count is not None else get_default_base_count()
        self.seed = ""
        self.advisors: list[Advisor] = []
        self.briefs: list[Brief] = []
        self.modules: list[TrainingModule] = list(TRAINING_MODULES)
        self.assignments: list[LessonAssignment] = []
        self.completions: list[LessonCompletion] = []
        self.regenerate(seed if seed is not None else get_default_seed())

    # --- dataset lifecycle ---

    def regenerate(self, seed: str) -> None:
        """Replace the dataset with a fresh universe and clear lesson history."""
        universe = self._builder.build(seed, self.base_count)
        self.seed = universe.seed
        self.advisors = list(universe.advisors)
        self.briefs = list(universe.briefs)
        self.modules = list(universe.modules)
        self.assignments = []
        self.completions = []
        logger.info("Workspace regenerated seed=%s briefs=%d", self.seed, len(self.briefs))

    def add_briefs(self, n: int) -> list[Brief]:
        """Append ``n`` incremental briefs and register any new advisors."""
        generated = self._builder.add_briefs(
            self.seed, self.base_count, self.briefs, n, roster=self.advisors
        )
        known = {advisor.id for advisor in self.advisors}
        for brief in generated:
            if brief.advisor.id not in known:
                self.advisors.append(brief.advisor)
                known.add(brief.advisor.id)
        self.briefs.extend(generated)
        return generated

    def create_brief(self, form: BriefFormInput) -> Brief:
        """Create a brief from form input; the form's advisor joins the roster if new."""
        brief = self._builder.create_brief_from_form(self.seed, form, self.briefs)
        self.briefs.append(brief)
        if all(advisor.id != form.advisor.id for advisor in self.advisors):
            self.advisors.append(form.advisor)
        return brief

    # --- supervisor actions ---

    def get_brief(self, brief_id: str) -> Brief:
        for brief in self.briefs:
            if brief.id == brief_id:
                return brief
        raise BriefNotFoundError(f"Unknown brief id: {brief_id!r}", details={"brief_id": brief_id})

    def get_advisor(self, advisor_id: str) -> Advisor:
        for advisor in self.advisors:
            if advisor.id == advisor_id:
                return advisor
        raise AdvisorNotFoundError(
            f"Unknown advisor id: {advisor_id!r}", details={"advisor_id": advisor_id}
        )

    def _replace_brief(self, updated: Brief) -> Brief:
        self.briefs = [updated if brief.id == updated.id else brief for brief in self.briefs]
        return updated

    def approve_brief(self, brief_id: str) -> Brief:
        brief = self.get_brief(brief_id)
        logger.info("Brief %s approved", brief_id)
        return self._replace_brief(
            brief.model_copy(update={"approved": True, "supervisor_comment": None})
        )

    def request_changes(self, brief_id: str, comment: str) -> Brief:
        brief = self.get_brief(brief_id)
        logger.info("Changes requested on brief %s", brief_id)
        return self._replace_brief(
            brief.model_copy(update={"approved": False, "supervisor_comment": comment})
        )

    def assign_micro_lesson(self, advisor_id: str, topic: TopicKey | str) -> TrainingModule:
        """Record a lesson assignment and return the lesson for the topic."""
        self.get_advisor(advisor_id)
        key = coerce_topic(topic)
        self.assignments.append(LessonAssignment(advisor_id=advisor_id, topic=key))
        logger.info("Assigned %s lesson to advisor %s", key, advisor_id)
        return next(m for m in self.modules if m.topic == key)

    def complete_micro_lesson(self, advisor_id: str, topic: TopicKey | str) -> list[Brief]:
        """Record completion and lift the topic on the advisor's briefs where it is weak.

        Coverage rises by 0.1 (capped at 1.0), the compliance IQ is recomputed
        and weak topics are re-derived with the completed topic removed, except
        suitability while the recomputed IQ still forces it.

        Returns:
            The briefs that changed.
        """
        self.get_advisor(advisor_id)
        key = coerce_topic(topic)
        self.completions.append(
            LessonCompletion(
                advisor_id=advisor_id, topic=key, completed_at=self._clock().isoformat()
            )
        )

        changed: list[Brief] = []
        updated_briefs: list[Brief] = []
        for brief in self.briefs:
            if brief.advisor.id != advisor_id or key not in brief.weak_topics:
                updated_briefs.append(brief)
                continue
            coverage = brief.coverage.boosted(key, LESSON_COVERAGE_BOOST)
            iq = self._scorer.compliance_iq(coverage, len(brief.flags))
            # Suitability stays weak while the IQ is still below the low-IQ threshold.
            still_forced = (
                key is TopicKey.SUITABILITY_OBJECTIVE
                and iq < self._scorer.rule_set.low_iq_threshold
            )
            weak = [
                t for t in self._scorer.derive_weak_topics(coverage, iq) if t != key or still_forced
            ]
            updated = brief.model_copy(
                update={"coverage": coverage, "compliance_iq": iq, "weak_topics": weak}
            )
            updated_briefs.append(updated)
            changed.append(updated)
        self.briefs = updated_briefs
        logger.info(
            "Advisor %s completed %s lesson; %d briefs updated", advisor_id, key, len(changed)
        )
        return changed

    def escalate_advisor(self, advisor_id: str, note: str) -> Advisor:
        """Flag an advisor for escalation, including every brief snapshot of them."""
        advisor = self.get_advisor(advisor_id)
        escalated = advisor.model_copy(update={"escalated": True, "escalated_note": note})
        self.advisors = [escalated if a.id == advisor_id else a for a in self.advisors]
        self.briefs = [
            brief.model_copy(update={"advisor": escalated})
            if brief.advisor.id == advisor_id
            else brief
            for brief in self.briefs
        ]
        logger.info("Advisor %s escalated", advisor_id)
        return escalated

    # --- read models ---

    def filtered_briefs(self, filters: BriefFilters = DEFAULT_FILTERS) -> list[Brief]:
        return filters.apply(self.briefs)

    def stats(self, filters: BriefFilters = DEFAULT_FILTERS) -> MindshareStats:
        visible = self.filtered_briefs(filters)
        if not visible:
            return MindshareStats(
                average_iq=0, briefs_visible=0, top_weak_topic=None, flags_per_brief=0.0
            )
        weak_counts = Counter(topic for brief in visible for topic in brief.weak_topics)
        top_weak = weak_counts.most_common(1)
        return MindshareStats(
            average_iq=round_half_up(sum(b.compliance_iq for b in visible) / len(visible)),
            briefs_visible=len(visible),
            top_weak_topic=top_weak[0][0] if top_weak else None,
            flags_per_brief=_round_to(sum(len(b.flags) for b in visible) / len(visible), 1),
        )

    def insights(self) -> WorkspaceInsights:
        total = len(self.briefs) or 1
        total_flags = sum(len(brief.flags) for brief in self.briefs)
        completion_rate = (
            round_half_up(len(self.completions) / len(self.assignments) * 100)
            if self.assignments
            else 0
        )
        return WorkspaceInsights(
            lesson_completion_rate=completion_rate,
            redline_rate=_round_to(total_flags / total, 2),
            average_flags=_round_to(total_flags / total, 2),
            supervisor_pending=sum(1 for brief in self.briefs if not brief.approved),
        )

    def graph(
        self,
        filters: BriefFilters = DEFAULT_FILTERS,
        cluster_mode: ClusterMode | str = ClusterMode.TOPIC,
        k: int = DEFAULT_NEIGHBOR_COUNT,
    ) -> SimilarityGraph:
        return build_similarity_graph(self.filtered_briefs(filters), k=k, cluster_mode=cluster_mode)

    def audit_snapshot(self, filters: BriefFilters = DEFAULT_FILTERS) -> AuditSnapshot:
        """Summarize the visible briefs for an audit export.

        Weak topics are ranked by accumulated IQ gap (100 - IQ) rather than by
        count, so weak topics on low-scoring briefs rank first.
        """
        visible = self.filtered_briefs(filters)
        topic_counts = Counter(topic for brief in visible for topic in brief.topics)
        weak_gap: Counter[TopicKey] = Counter()
        for brief in visible:
            for topic in brief.weak_topics:
                weak_gap[topic] += 100 - brief.compliance_iq

        low_count = max(MIN_LOW_PERFORMERS, int(len(visible) * LOW_PERFORMER_FRACTION))
        lowest = sorted(visible, key=lambda b: b.compliance_iq)[:low_count]
        redlined = [brief for brief in visible if brief.flags][:AUDIT_SAMPLE_REDLINES]

        return AuditSnapshot(
            generated_at=self._clock().isoformat(),
            filters=filters,
            top_topics=[topic for topic, _ in topic_counts.most_common(AUDIT_TOP_N)],
            top_weak_topics=[topic for topic, _ in weak_gap.most_common(AUDIT_TOP_N)],
            low_performers=[
                LowPerformer(advisor=b.advisor.name, office=b.office.value, iq=b.compliance_iq)
                for b in lowest
            ],
            micro_lesson_counts=LessonCounts(
                assigned=len(self.assignments), completed=len(self.completions)
            ),
            sample_redlines=[
                SampleRedline(advisor=b.advisor.name, before=b.flags[0].text, after=b.flags[0].fix)
                for b in redlined
            ],
        )
