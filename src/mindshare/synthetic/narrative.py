"""Narrative composer for synthetic meeting briefs.

Assembles a five-line brief (agenda, client summary, suitability narrative,
disclosure line, recordkeeping line) from lexicon pools. Agenda time slots are
fixed fractions of the meeting length with floors. A mistake hook appends one
promissory sentence with a fixed probability; it is the only source of
redline flags in generated data.

Every output contains the product name and each topic key verbatim.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from mindshare.models.brief import ClientProfile, Product, TopicKey
from mindshare.rounding import round_half_up
from mindshare.synthetic.lexicon import DEFAULT_LEXICON, Lexicon
from mindshare.synthetic.rng import SeededRng

DEFAULT_MISTAKE_PROBABILITY = 0.15


@dataclass(frozen=True)
class AgendaTiming:
    """Minutes allotted to each agenda block."""

    recap: int
    discovery: int
    solution: int
    wrap_up: int


def allocate_agenda_minutes(total_minutes: int) -> AgendaTiming:
    return AgendaTiming(
        recap=min(5, round_half_up(total_minutes * 0.2)),
        discovery=max(5, round_half_up(total_minutes * 0.35)),
        solution=max(6, round_half_up(total_minutes * 0.35)),
        wrap_up=max(4, round_half_up(total_minutes * 0.2)),
    )


def _topic_list(topics: Sequence[TopicKey]) -> str:
    return ", ".join(topic.value for topic in topics)


class NarrativeComposer:
    """Draws template fragments from an injected lexicon."""

    def __init__(
        self,
        lexicon: Lexicon = DEFAULT_LEXICON,
        mistake_probability: float = DEFAULT_MISTAKE_PROBABILITY,
    ) -> None:
        self._lexicon = lexicon
        self._mistake_probability = mistake_probability

    @property
    def lexicon(self) -> Lexicon:
        return self._lexicon

    def compose_meeting_brief(
        self,
        rng: SeededRng,
        product: Product,
        client: ClientProfile,
        topics: Sequence[TopicKey],
        time_available_min: int,
    ) -> str:
        """Compose the generated-brief narrative (universe and incremental paths)."""
        lex = self._lexicon
        discovery_focus = rng.pick_one(lex.objectives)
        suitability = rng.pick_one(lex.suitability_notes)
        disclosure = rng.pick_one(lex.disclosure_lines)
        recordkeeping = rng.pick_one(lex.recordkeeping_lines)
        timing = allocate_agenda_minutes(time_available_min)

        agenda = " ".join(
            [
                f"Warm recap and privacy reminder ({timing.recap} min).",
                f"Discovery on {discovery_focus} ({timing.discovery} min).",
                f"Solution positioning around {_topic_list(topics)} with {product.value} "
                f"illustrations ({timing.solution} min).",
                f"Next steps, disclosures, and CRM logging ({timing.wrap_up} min).",
            ]
        )
        return "\n".join(
            [
                f"Agenda: {agenda}",
                f"Client milestones: {'; '.join(client.milestones)}. Risk comfort is "
                f"{client.risk.value.lower()} with {client.dependents} dependents.",
                f"Suitability narrative: {suitability}",
                f"Disclosure conversation: {disclosure}",
                f"Recordkeeping: {recordkeeping}",
            ]
        )

    def compose_form_brief(
        self,
        rng: SeededRng,
        objective: str,
        product: Product,
        client: ClientProfile,
        topics: Sequence[TopicKey],
        time_available_min: int,
    ) -> str:
        """Compose the narrative for a brief submitted through the creation form."""
        lex = self._lexicon
        timing = allocate_agenda_minutes(time_available_min)
        agenda = (
            f"Agenda: Warm recap ({timing.recap} min). Objective: {objective}."
            f" Discovery on {', '.join(client.milestones)} ({timing.discovery} min)."
            f" Solution alignment for {product.value} with {_topic_list(topics)} checkpoints"
            f" ({timing.solution} min)."
            f" Next steps & disclosures ({timing.wrap_up} min)."
        )
        return "\n".join(
            [
                agenda,
                f"Client risk posture {client.risk.value.lower()} with "
                f"{client.dependents} dependents.",
                f"Suitability narrative: {rng.pick_one(lex.suitability_notes)}",
                f"Disclosure conversation: {rng.pick_one(lex.disclosure_lines)}",
                f"Recordkeeping: {rng.pick_one(lex.recordkeeping_lines)}",
            ]
        )

    def inject_mistake(self, rng: SeededRng, text: str) -> str:
        """Append a promissory sentence with the configured probability."""
        if not rng.chance(self._mistake_probability):
            return text
        phrase = rng.pick_one(self._lexicon.mistake_phrases)
        return f"{text}\nPromissory language noted: {phrase} returns discussed informally."
