"""Brief domain models.

Defines the advisor meeting brief record and its parts:
- TopicKey: the six compliance dimensions (closed set)
- Office / Product / RiskBand / AdvisorTenure / AgeBand / Channel: closed sets
- Advisor: advisor identity with optional escalation
- ClientProfile: embedded, immutable client description
- Coverage: closed-field per-topic coverage in [0, 1]
- RedlineFlag: forbidden phrase match with rationale and rewrite
- Brief: the central record (frozen; lifecycle changes produce copies)
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mindshare.errors import MindshareValidationError


class TopicKey(StrEnum):
    """Compliance dimensions a brief can cover."""

    SUITABILITY_OBJECTIVE = "suitability_objective"
    RISK_TOLERANCE = "risk_tolerance"
    LIQUIDITY_NEEDS = "liquidity_needs"
    TIME_HORIZON = "time_horizon"
    CONFLICT_DISCLOSURE = "conflict_disclosure"
    RECORDKEEPING = "recordkeeping"


ALL_TOPICS: tuple[TopicKey, ...] = tuple(TopicKey)


class Office(StrEnum):
    """Regional office an advisor belongs to."""

    NORTHEAST = "Northeast"
    SOUTHEAST = "Southeast"
    MIDWEST = "Midwest"
    SOUTHWEST = "Southwest"
    WEST = "West"


class Product(StrEnum):
    """Product discussed in a meeting."""

    TERM_LIFE = "Term Life"
    WHOLE_LIFE = "Whole Life"
    ANNUITY = "Annuity"
    ROLLOVER_401K = "401k Rollover"
    COLLEGE_SAVINGS = "College Savings"


class RiskBand(StrEnum):
    """Client risk tolerance band."""

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


class AdvisorTenure(StrEnum):
    """Advisor tenure band."""

    NOVICE = "novice"
    TENURED = "tenured"
    TOP = "top"


class AgeBand(StrEnum):
    """Client age band."""

    AGE_18_25 = "18-25"
    AGE_26_35 = "26-35"
    AGE_36_50 = "36-50"
    AGE_51_65 = "51-65"


class Channel(StrEnum):
    """Meeting channel."""

    IN_PERSON = "In-Person"
    VIRTUAL = "Virtual"


MEETING_LENGTHS: tuple[int, ...] = (15, 30, 60)


def coerce_topic(value: TopicKey | str) -> TopicKey:
    """Resolve a topic key, failing closed on values outside the closed set."""
    try:
        return TopicKey(value)
    except ValueError as exc:
        raise MindshareValidationError(
            f"Unknown topic key: {value!r}",
            details={"allowed": [t.value for t in ALL_TOPICS]},
        ) from exc


def coerce_topics(values: Iterable[TopicKey | str]) -> list[TopicKey]:
    """Resolve a sequence of topic keys, preserving order."""
    return [coerce_topic(v) for v in values]


def _check_meeting_length(value: int) -> int:
    if value not in MEETING_LENGTHS:
        raise ValueError(f"time available must be one of {list(MEETING_LENGTHS)}, got {value}")
    return value


class Advisor(BaseModel):
    """Advisor identity as snapshotted into briefs."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Advisor identifier, e.g. adv-001")
    name: str = Field(..., min_length=1, description="Display name")
    tenure: AdvisorTenure
    office: Office
    escalated: bool = False
    escalated_note: str | None = None


class ClientProfile(BaseModel):
    """Client description embedded in a brief."""

    model_config = ConfigDict(frozen=True)

    age_band: AgeBand
    dependents: int = Field(..., ge=0, le=12, description="Number of dependents")
    risk: RiskBand
    milestones: list[str] = Field(default_factory=list, description="Life milestone tags")


class Coverage(BaseModel):
    """Per-topic coverage score in [0, 1].

    One field per TopicKey so a coverage map can never miss a dimension.
    """

    model_config = ConfigDict(frozen=True)

    suitability_objective: float = Field(0.0, ge=0.0, le=1.0)
    risk_tolerance: float = Field(0.0, ge=0.0, le=1.0)
    liquidity_needs: float = Field(0.0, ge=0.0, le=1.0)
    time_horizon: float = Field(0.0, ge=0.0, le=1.0)
    conflict_disclosure: float = Field(0.0, ge=0.0, le=1.0)
    recordkeeping: float = Field(0.0, ge=0.0, le=1.0)

    @classmethod
    def from_mapping(cls, values: dict[TopicKey, float]) -> Coverage:
        """Build coverage from a topic mapping; missing topics count as 0."""
        return cls(**{topic.value: float(values.get(topic, 0.0)) for topic in ALL_TOPICS})

    def get(self, topic: TopicKey | str) -> float:
        return float(getattr(self, coerce_topic(topic).value))

    def as_dict(self) -> dict[TopicKey, float]:
        return {topic: self.get(topic) for topic in ALL_TOPICS}

    def boosted(self, topic: TopicKey | str, by: float) -> Coverage:
        """Return a copy with one dimension raised by ``by``, capped at 1.0."""
        key = coerce_topic(topic)
        return self.model_copy(update={key.value: min(1.0, self.get(key) + by)})


class RedlineFlag(BaseModel):
    """A forbidden phrase found in brief text."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., min_length=1, description="Matched phrase")
    reason: str = Field(..., description="Why the phrase is non-compliant")
    fix: str = Field(..., description="Suggested compliant rewrite")


class Brief(BaseModel):
    """Synthesized advisor meeting brief.

    compliance_iq and weak_topics are always derived from coverage and flags
    by the scorer; flags are derived from brief_text. Supervisor actions and
    lesson completion produce updated copies via model_copy.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    advisor: Advisor
    office: Office
    product: Product
    client: ClientProfile
    channel: Channel
    time_available_min: int = Field(..., description="Meeting length: 15, 30 or 60 minutes")
    brief_text: str = Field(..., min_length=1)
    topics: list[TopicKey]
    flags: list[RedlineFlag] = Field(default_factory=list)
    coverage: Coverage
    compliance_iq: int = Field(..., ge=0, le=100)
    weak_topics: list[TopicKey] = Field(default_factory=list)
    created_at: str = Field(..., description="ISO-8601 creation timestamp")
    approved: bool = False
    supervisor_comment: str | None = None

    @field_validator("time_available_min")
    @classmethod
    def _validate_meeting_length(cls, value: int) -> int:
        return _check_meeting_length(value)
