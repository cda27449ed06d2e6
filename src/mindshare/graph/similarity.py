"""k-nearest-neighbor similarity graph over brief topic vectors.

For each node, the other nodes are ranked by cosine similarity (stable on
ties, so input order breaks them), the top k are kept and any pair below the
threshold is dropped. Links are undirected: a pair found from both ends is
emitted once, in the orientation it was first discovered.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from mindshare.errors import MindshareValidationError
from mindshare.graph.vectors import Vector, compute_vector_map, cosine_similarity, vector_for_topics
from mindshare.models.brief import Brief
from mindshare.models.graph import ClusterMode, GraphLink, GraphNode, SimilarityGraph

logger = logging.getLogger(__name__)

DEFAULT_NEIGHBOR_COUNT = 3
DEFAULT_SIMILARITY_THRESHOLD = 0.22
BALANCED_CLUSTER = "balanced"


def nearest_neighbors(
    ids: Sequence[str],
    vectors: Mapping[str, Vector],
    k: int = DEFAULT_NEIGHBOR_COUNT,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[GraphLink]:
    """Link each id to its k most similar peers at or above the threshold.

    Args:
        ids: Node ids in display order.
        vectors: Vector per id.
        k: Neighbors considered per node.
        threshold: Minimum cosine similarity for a link.

    Returns:
        Deduplicated undirected links with strength in [0, 1].

    Raises:
        MindshareValidationError: If k is negative or an id has no vector.
    """
    if k < 0:
        raise MindshareValidationError("k must be non-negative", details={"k": k})
    missing = [node_id for node_id in ids if node_id not in vectors]
    if missing:
        raise MindshareValidationError("Missing vectors for ids", details={"ids": missing})

    links: list[GraphLink] = []
    seen: set[frozenset[str]] = set()
    for idx, node_id in enumerate(ids):
        candidates = [
            (other_id, cosine_similarity(vectors[node_id], vectors[other_id]))
            for j, other_id in enumerate(ids)
            if j != idx
        ]
        candidates.sort(key=lambda pair: pair[1], reverse=True)
        for other_id, sim in candidates[:k]:
            if sim < threshold or other_id == node_id:
                continue
            pair = frozenset((node_id, other_id))
            if pair in seen:
                continue
            seen.add(pair)
            links.append(GraphLink(source=node_id, target=other_id, strength=max(sim, 0.0)))
    return links


def cluster_key(brief: Brief, mode: ClusterMode) -> str:
    if mode == ClusterMode.OFFICE:
        return brief.office.value
    if mode == ClusterMode.PRODUCT:
        return brief.product.value
    return brief.weak_topics[0].value if brief.weak_topics else BALANCED_CLUSTER


def build_similarity_graph(
    briefs: Sequence[Brief],
    k: int = DEFAULT_NEIGHBOR_COUNT,
    cluster_mode: ClusterMode | str = ClusterMode.TOPIC,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    jitter: bool = True,
) -> SimilarityGraph:
    """Build graph nodes and kNN links for the given briefs.

    Raises:
        MindshareValidationError: If k is negative or the cluster mode is unknown.
    """
    if k < 0:
        raise MindshareValidationError("k must be non-negative", details={"k": k})
    try:
        mode = ClusterMode(cluster_mode)
    except ValueError as exc:
        raise MindshareValidationError(
            f"Unknown cluster mode: {cluster_mode!r}",
            details={"allowed": [m.value for m in ClusterMode]},
        ) from exc

    if jitter:
        vectors = compute_vector_map(briefs)
    else:
        vectors = {brief.id: vector_for_topics(brief.topics) for brief in briefs}

    nodes = [
        GraphNode(
            id=brief.id,
            iq=brief.compliance_iq,
            topics=brief.topics,
            weak_topics=brief.weak_topics,
            cluster_key=cluster_key(brief, mode),
            approved=brief.approved,
            vector=vectors[brief.id],
        )
        for brief in briefs
    ]
    links = nearest_neighbors([brief.id for brief in briefs], vectors, k=k, threshold=threshold)
    logger.debug("Built similarity graph nodes=%d links=%d mode=%s", len(nodes), len(links), mode)
    return SimilarityGraph(nodes=nodes, links=links)
