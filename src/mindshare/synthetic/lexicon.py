"""Lexicon tables for the synthetic generator.

Pure data: name pools, milestone library, narrative fragment pools and the
promissory phrases used to simulate advisor mistakes. Bundled into one frozen
Lexicon so alternate vocabularies can be injected without touching code.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from mindshare.models.brief import TopicKey


class Lexicon(BaseModel):
    """Immutable word and phrase pools."""

    model_config = ConfigDict(frozen=True)

    first_names: tuple[str, ...]
    last_names: tuple[str, ...]
    milestones: tuple[str, ...]
    objectives: tuple[str, ...]
    suitability_notes: tuple[str, ...]
    disclosure_lines: tuple[str, ...]
    recordkeeping_lines: tuple[str, ...]
    supervisor_comments: tuple[str, ...]
    mistake_phrases: tuple[str, ...] = Field(
        ..., description="Promissory phrases injected to simulate advisor mistakes"
    )
    primary_topics: tuple[TopicKey, ...] = Field(
        ..., description="Pool the two mandatory universe topics are drawn from"
    )
    secondary_topics: tuple[TopicKey, ...] = Field(
        ..., description="Pool the optional third universe topic is drawn from"
    )

    @model_validator(mode="after")
    def _require_non_empty_pools(self) -> Lexicon:
        """Fail closed: every pool is drawn from, so none may be empty."""
        empty = [name for name, value in self if isinstance(value, tuple) and not value]
        if empty:
            raise ValueError(f"Lexicon pools must be non-empty: {sorted(empty)}")
        if len(self.primary_topics) < 2:
            raise ValueError("primary_topics needs at least 2 entries")
        return self


DEFAULT_LEXICON = Lexicon(
    first_names=(
        "Jordan",
        "Taylor",
        "Avery",
        "Morgan",
        "Casey",
        "Devin",
        "Riley",
        "Sydney",
        "Alex",
        "Quinn",
        "Jamie",
        "Logan",
        "Parker",
        "Reese",
        "Rowan",
        "Elliott",
        "Harper",
        "Micah",
        "Emerson",
        "Kai",
    ),
    last_names=(
        "Greene",
        "Lopez",
        "Patel",
        "Fischer",
        "Ramirez",
        "Sato",
        "Nakamura",
        "Bryant",
        "Singh",
        "O'Neill",
        "Hansen",
        "Diaz",
        "Carter",
        "Morales",
        "Hudson",
        "Wallace",
        "Chen",
        "Nguyen",
        "Ibrahim",
        "Crawford",
    ),
    milestones=(
        "recent home purchase",
        "college planning",
        "retirement transition",
        "new child",
        "divorce settlement",
        "inheritance event",
        "small business launch",
        "aging parent care",
    ),
    objectives=(
        "reinforce retirement income coverage",
        "evaluate liquidity ahead of tuition payments",
        "rebalance protection and accumulation needs",
        "prepare for executive compensation changes",
        "align estate intentions with new beneficiary designations",
    ),
    suitability_notes=(
        "Documented how recommendations support stated objective while honoring risk constraints.",
        "Captured rationale for product mix referencing the client's stated timeline and "
        "liquidity windows.",
        "Re-validated source of funds and ensured no conflict with existing workplace programs.",
        "Highlighted service model commitments and recorded disclosure acknowledgement in CRM.",
        "Outlined next steps for beneficiary updates and compliance review checkpoints.",
    ),
    disclosure_lines=(
        "Reviewed compensation differentials and logged acknowledgment before illustrations.",
        "Confirmed best-interest obligations and provided the current disclosure packet.",
        "Discussed potential conflicts and aligned on supervisory review cadence.",
        "Summarized Reg BI requirements and captured the client's questions in notes.",
    ),
    recordkeeping_lines=(
        "Uploaded agenda and suitability worksheet to CRM within 2 hours.",
        "Tagged meeting artifacts for supervisory audit and follow-up.",
        "Attached e-sign consent and queued compliance checklist.",
        "Scheduled recordkeeping reminder and linked supporting documents.",
    ),
    supervisor_comments=(
        "Requested clearer liquidity rationale.",
        "Please tie the recommendation back to the stated objective.",
        "Add the disclosure acknowledgement to the CRM record.",
    ),
    mistake_phrases=("guaranteed", "assured", "will outperform", "no-risk"),
    primary_topics=(
        TopicKey.SUITABILITY_OBJECTIVE,
        TopicKey.RISK_TOLERANCE,
        TopicKey.LIQUIDITY_NEEDS,
        TopicKey.TIME_HORIZON,
    ),
    secondary_topics=(TopicKey.CONFLICT_DISCLOSURE, TopicKey.RECORDKEEPING),
)
