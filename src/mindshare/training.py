"""Micro-lesson training catalog.

One short module per compliance topic. Supervisors assign a module for an
advisor's weak topic; completing it lifts that topic's coverage on the
advisor's briefs (see MindshareWorkspace.complete_micro_lesson).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from mindshare.models.brief import TopicKey, coerce_topic


class TrainingModule(BaseModel):
    """A micro-lesson with a single scenario question."""

    model_config = ConfigDict(frozen=True)

    id: str
    topic: TopicKey
    title: str
    duration_min: int = Field(..., gt=0)
    url: str
    bullets: tuple[str, ...]
    scenario_question: str
    scenario_choices: tuple[str, ...]
    answer_index: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _answer_in_range(self) -> TrainingModule:
        if self.answer_index >= len(self.scenario_choices):
            raise ValueError("answer_index must reference one of the scenario choices")
        return self


TRAINING_MODULES: tuple[TrainingModule, ...] = (
    TrainingModule(
        id="mod-objectives",
        topic=TopicKey.SUITABILITY_OBJECTIVE,
        title="Documenting Client Objectives",
        duration_min=5,
        url="/training/objectives",
        bullets=(
            "Capture the client's primary objective in their own words",
            "Link every recommendation directly to a stated objective",
            "Revisit objectives at each meeting to track how they evolve",
        ),
        scenario_question=(
            'A client says they want to "save for retirement." What is the best follow-up?'
        ),
        scenario_choices=(
            "Share the annuity brochure",
            "Ask what age they envision retiring and the lifestyle they want",
            "Recommend a 401k rollover",
        ),
        answer_index=1,
    ),
    TrainingModule(
        id="mod-risk-discussion",
        topic=TopicKey.RISK_TOLERANCE,
        title="Guiding Risk Tolerance Dialogues",
        duration_min=6,
        url="/training/risk",
        bullets=(
            "Frame market scenarios with plain-language benchmarks",
            "Document verbal risk cues inside the CRM template",
            "Connect risk comfort directly to solution positioning",
        ),
        scenario_question=(
            'Client says they are "comfortable with some risk" while also fearing losses. '
            "What is your best next step?"
        ),
        scenario_choices=(
            "Move forward with growth model to build confidence",
            "Clarify loss thresholds and translate into allocation bands",
            "Shift immediately to capital preservation products",
        ),
        answer_index=1,
    ),
    TrainingModule(
        id="mod-liquidity",
        topic=TopicKey.LIQUIDITY_NEEDS,
        title="Liquidity First Playbook",
        duration_min=5,
        url="/training/liquidity",
        bullets=(
            "Assess cash runway and known short-term obligations",
            "Surface hidden liquidity needs like tuition or caregiving",
            "Tie liquidity recommendations to compliance guardrails",
        ),
        scenario_question="Household has limited cash reserves and upcoming tuition. What do you log?",
        scenario_choices=(
            "Note that tuition is outside advisory scope",
            "Document the tuition milestone and adjust liquidity coverage",
            "Focus on retirement assets only",
        ),
        answer_index=1,
    ),
    TrainingModule(
        id="mod-time-horizon",
        topic=TopicKey.TIME_HORIZON,
        title="Framing Time Horizons Clearly",
        duration_min=5,
        url="/training/time",
        bullets=(
            "Map each goal to a specific timeline band",
            "Use the visual timeline tool during discovery",
            "Confirm horizon alignment before any illustrations",
        ),
        scenario_question="Client's retirement is 12 years out. Which wording documents horizon?",
        scenario_choices=(
            "Retirement soon, present annuity",
            "Retirement targeted 12-year horizon, validate with client",
            "Horizon not discussed",
        ),
        answer_index=1,
    ),
    TrainingModule(
        id="mod-conflict",
        topic=TopicKey.CONFLICT_DISCLOSURE,
        title="Conflict Transparency Essentials",
        duration_min=7,
        url="/training/conflict",
        bullets=(
            "Deliver the standard disclosure packet every meeting",
            "Explain compensation differentials calmly and clearly",
            "Capture client acknowledgement in the CRM log",
        ),
        scenario_question="When must conflict language be logged?",
        scenario_choices=(
            "Only when selling proprietary products",
            "Every recommendation meeting with summary in CRM",
            "Only during annual reviews",
        ),
        answer_index=1,
    ),
    TrainingModule(
        id="mod-recordkeeping",
        topic=TopicKey.RECORDKEEPING,
        title="Audit-Proof Recordkeeping",
        duration_min=6,
        url="/training/records",
        bullets=(
            "Upload notes and suitability rationale within 24 hours",
            "Tag attachments with meeting objective and date",
            "Capture electronic signatures for virtual sessions",
        ),
        scenario_question="Virtual meeting concluded with e-sign. What is required?",
        scenario_choices=(
            "No action if platform recorded the session",
            "Log disclosure delivery and attach consent receipt",
            "Only email supervisor",
        ),
        answer_index=1,
    ),
)

_MODULES_BY_TOPIC: dict[TopicKey, TrainingModule] = {m.topic: m for m in TRAINING_MODULES}


def get_training_module(topic: TopicKey | str) -> TrainingModule:
    """Return the micro-lesson for a topic."""
    return _MODULES_BY_TOPIC[coerce_topic(topic)]
