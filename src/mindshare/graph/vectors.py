"""Topic vectors for the similarity graph.

Each compliance topic has a fixed 2D embedding. A brief's vector is the mean
of its topics' embeddings plus a small deterministic jitter derived from the
brief id, so briefs sharing a topic set do not collapse onto one point.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence

from mindshare.models.brief import Brief, TopicKey, coerce_topics

Vector = tuple[float, float]

TOPIC_VECTORS: Mapping[TopicKey, Vector] = {
    TopicKey.SUITABILITY_OBJECTIVE: (0.9, 0.2),
    TopicKey.RISK_TOLERANCE: (0.1, 0.8),
    TopicKey.LIQUIDITY_NEEDS: (-0.7, 0.4),
    TopicKey.TIME_HORIZON: (0.6, -0.5),
    TopicKey.CONFLICT_DISCLOSURE: (-0.2, -0.8),
    TopicKey.RECORDKEEPING: (-0.8, -0.2),
}

_HASH_MULTIPLIER = 31
_HASH_MODULUS = 10000
_JITTER_BASE = 0.2
_JITTER_SCALE = 500


def vector_for_topics(topics: Iterable[TopicKey | str]) -> Vector:
    """Mean of the topic embeddings; the origin for an empty topic list.

    Raises:
        MindshareValidationError: If a topic is outside the closed set.
    """
    keys = coerce_topics(topics)
    if not keys:
        return (0.0, 0.0)
    x = sum(TOPIC_VECTORS[key][0] for key in keys) / len(keys)
    y = sum(TOPIC_VECTORS[key][1] for key in keys) / len(keys)
    return (x, y)


def _id_hash(brief_id: str) -> int:
    h = 0
    for char in brief_id:
        h = (h * _HASH_MULTIPLIER + ord(char)) % _HASH_MODULUS
    return h


def jitter_vector(brief_id: str, vector: Vector) -> Vector:
    """Offset a vector by an id-derived angle and magnitude. Same id, same offset."""
    h = _id_hash(brief_id)
    angle = math.radians(h % 360)
    magnitude = _JITTER_BASE + (h % 100) / _JITTER_SCALE
    return (vector[0] + math.cos(angle) * magnitude, vector[1] + math.sin(angle) * magnitude)


def compute_vector_map(briefs: Sequence[Brief]) -> dict[str, Vector]:
    """Jittered topic vector for every brief, keyed by brief id."""
    return {brief.id: jitter_vector(brief.id, vector_for_topics(brief.topics)) for brief in briefs}


def cosine_similarity(a: Vector, b: Vector) -> float:
    """Cosine of the angle between two vectors; 0.0 if either is the zero vector."""
    dot = a[0] * b[0] + a[1] * b[1]
    norm_a = math.hypot(a[0], a[1])
    norm_b = math.hypot(b[0], b[1])
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return max(-1.0, min(1.0, dot / (norm_a * norm_b)))
