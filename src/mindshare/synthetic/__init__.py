"""Mindshare synthetic data generation.

Seeded, reproducible advisor/brief universes:
- SeededRng: the single source of randomness
- Lexicon: injectable word and phrase pools
- NarrativeComposer: brief text templates plus mistake injection
- UniverseBuilder: full universe, incremental and form-driven briefs
"""

from mindshare.synthetic.lexicon import DEFAULT_LEXICON, Lexicon
from mindshare.synthetic.narrative import (
    DEFAULT_MISTAKE_PROBABILITY,
    AgendaTiming,
    NarrativeComposer,
    allocate_agenda_minutes,
)
from mindshare.synthetic.rng import SeededRng
from mindshare.synthetic.universe import (
    FORM_APPROVAL,
    INCREMENTAL_APPROVAL,
    UNIVERSE_APPROVAL,
    ApprovalPolicy,
    BriefFormInput,
    IncrementalBrief,
    SyntheticUniverse,
    UniverseBuilder,
    add_briefs,
    create_brief_from_form,
    decide_approval,
    generate_universe,
)

__all__ = [
    "DEFAULT_LEXICON",
    "DEFAULT_MISTAKE_PROBABILITY",
    "FORM_APPROVAL",
    "INCREMENTAL_APPROVAL",
    "UNIVERSE_APPROVAL",
    "AgendaTiming",
    "ApprovalPolicy",
    "BriefFormInput",
    "IncrementalBrief",
    "Lexicon",
    "NarrativeComposer",
    "SeededRng",
    "SyntheticUniverse",
    "UniverseBuilder",
    "add_briefs",
    "allocate_agenda_minutes",
    "create_brief_from_form",
    "decide_approval",
    "generate_universe",
]
