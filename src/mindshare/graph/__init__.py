"""Mindshare similarity graph: topic vectors and kNN links between briefs."""

from mindshare.graph.similarity import (
    BALANCED_CLUSTER,
    DEFAULT_NEIGHBOR_COUNT,
    DEFAULT_SIMILARITY_THRESHOLD,
    build_similarity_graph,
    cluster_key,
    nearest_neighbors,
)
from mindshare.graph.vectors import (
    TOPIC_VECTORS,
    Vector,
    compute_vector_map,
    cosine_similarity,
    jitter_vector,
    vector_for_topics,
)

__all__ = [
    "BALANCED_CLUSTER",
    "DEFAULT_NEIGHBOR_COUNT",
    "DEFAULT_SIMILARITY_THRESHOLD",
    "TOPIC_VECTORS",
    "Vector",
    "build_similarity_graph",
    "cluster_key",
    "compute_vector_map",
    "cosine_similarity",
    "jitter_vector",
    "nearest_neighbors",
    "vector_for_topics",
]
