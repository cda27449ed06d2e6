"""Tests for topic vectors and the kNN similarity graph."""

from __future__ import annotations

import math
from collections.abc import Callable
from datetime import datetime

import pytest

from mindshare.errors import MindshareValidationError
from mindshare.graph.similarity import (
    BALANCED_CLUSTER,
    DEFAULT_SIMILARITY_THRESHOLD,
    build_similarity_graph,
    nearest_neighbors,
)
from mindshare.graph.vectors import (
    TOPIC_VECTORS,
    compute_vector_map,
    cosine_similarity,
    jitter_vector,
    vector_for_topics,
)
from mindshare.models.brief import Brief, TopicKey
from mindshare.models.graph import ClusterMode
from mindshare.synthetic.universe import UniverseBuilder


@pytest.fixture
def briefs(fixed_clock: Callable[[], datetime]) -> list[Brief]:
    return UniverseBuilder(clock=fixed_clock).build("graph", 60).briefs


class TestTopicVectors:
    """Mean topic embeddings and id jitter."""

    def test_empty_topics_is_origin(self) -> None:
        assert vector_for_topics([]) == (0.0, 0.0)

    def test_single_topic_is_its_embedding(self) -> None:
        assert vector_for_topics([TopicKey.RISK_TOLERANCE]) == (0.1, 0.8)

    def test_mean_of_topics(self) -> None:
        x, y = vector_for_topics([TopicKey.SUITABILITY_OBJECTIVE, TopicKey.TIME_HORIZON])
        assert x == pytest.approx(0.75)
        assert y == pytest.approx(-0.15)

    def test_unknown_topic_raises(self) -> None:
        with pytest.raises(MindshareValidationError):
            vector_for_topics(["nope"])

    def test_every_topic_has_an_embedding(self) -> None:
        assert set(TOPIC_VECTORS) == set(TopicKey)

    def test_jitter_is_deterministic(self) -> None:
        assert jitter_vector("brief-7", (0.5, 0.5)) == jitter_vector("brief-7", (0.5, 0.5))

    def test_jitter_differs_by_id(self) -> None:
        assert jitter_vector("brief-7", (0.0, 0.0)) != jitter_vector("brief-8", (0.0, 0.0))

    def test_jitter_magnitude_bounds(self) -> None:
        for i in range(1, 50):
            dx, dy = jitter_vector(f"brief-{i}", (0.0, 0.0))
            magnitude = math.hypot(dx, dy)
            assert 0.2 - 1e-9 <= magnitude < 0.4

    def test_vector_map_keys(self, briefs: list[Brief]) -> None:
        vectors = compute_vector_map(briefs)
        assert list(vectors) == [b.id for b in briefs]


class TestCosineSimilarity:
    """Cosine similarity edge cases."""

    def test_identical_direction(self) -> None:
        assert cosine_similarity((1.0, 1.0), (2.0, 2.0)) == pytest.approx(1.0)

    def test_opposite_direction(self) -> None:
        assert cosine_similarity((1.0, 0.0), (-3.0, 0.0)) == pytest.approx(-1.0)

    def test_orthogonal(self) -> None:
        assert cosine_similarity((1.0, 0.0), (0.0, 1.0)) == pytest.approx(0.0)

    def test_zero_vector_is_zero(self) -> None:
        assert cosine_similarity((0.0, 0.0), (1.0, 0.0)) == 0.0


class TestNearestNeighbors:
    """kNN link construction."""

    def test_small_example(self) -> None:
        vectors = {"a": (1.0, 0.0), "b": (1.0, 0.1), "c": (-1.0, 0.0)}
        links = nearest_neighbors(["a", "b", "c"], vectors, k=1)

        assert len(links) == 1
        assert (links[0].source, links[0].target) == ("a", "b")
        assert links[0].strength == pytest.approx(cosine_similarity((1.0, 0.0), (1.0, 0.1)))

    def test_threshold_respected(self, briefs: list[Brief]) -> None:
        vectors = compute_vector_map(briefs)
        links = nearest_neighbors([b.id for b in briefs], vectors)
        assert links
        for link in links:
            sim = cosine_similarity(vectors[link.source], vectors[link.target])
            assert sim >= DEFAULT_SIMILARITY_THRESHOLD
            assert 0.0 <= link.strength <= 1.0

    def test_no_self_links_or_duplicates(self, briefs: list[Brief]) -> None:
        vectors = compute_vector_map(briefs)
        links = nearest_neighbors([b.id for b in briefs], vectors, k=5)
        pairs = [frozenset((link.source, link.target)) for link in links]

        assert all(link.source != link.target for link in links)
        assert len(pairs) == len(set(pairs))

    def test_at_most_k_links_started_per_node(self, briefs: list[Brief]) -> None:
        vectors = compute_vector_map(briefs)
        links = nearest_neighbors([b.id for b in briefs], vectors, k=2)
        for brief in briefs:
            assert sum(1 for link in links if link.source == brief.id) <= 2

    def test_k_zero_has_no_links(self, briefs: list[Brief]) -> None:
        vectors = compute_vector_map(briefs)
        assert nearest_neighbors([b.id for b in briefs], vectors, k=0) == []

    def test_negative_k_raises(self) -> None:
        with pytest.raises(MindshareValidationError):
            nearest_neighbors(["a"], {"a": (1.0, 0.0)}, k=-1)

    def test_missing_vector_raises(self) -> None:
        with pytest.raises(MindshareValidationError):
            nearest_neighbors(["a", "b"], {"a": (1.0, 0.0)})


class TestBuildSimilarityGraph:
    """Graph assembly and cluster keys."""

    def test_empty_input(self) -> None:
        graph = build_similarity_graph([])
        assert graph.nodes == []
        assert graph.links == []

    def test_one_node_per_brief(self, briefs: list[Brief]) -> None:
        graph = build_similarity_graph(briefs)
        assert [n.id for n in graph.nodes] == [b.id for b in briefs]
        node_ids = {n.id for n in graph.nodes}
        for link in graph.links:
            assert link.source in node_ids
            assert link.target in node_ids

    def test_topic_cluster_key(self, briefs: list[Brief]) -> None:
        graph = build_similarity_graph(briefs, cluster_mode=ClusterMode.TOPIC)
        for brief, node in zip(briefs, graph.nodes, strict=True):
            expected = brief.weak_topics[0].value if brief.weak_topics else BALANCED_CLUSTER
            assert node.cluster_key == expected

    @pytest.mark.parametrize("mode", ["office", "product"])
    def test_dimension_cluster_keys(self, briefs: list[Brief], mode: str) -> None:
        graph = build_similarity_graph(briefs, cluster_mode=mode)
        for brief, node in zip(briefs, graph.nodes, strict=True):
            expected = brief.office.value if mode == "office" else brief.product.value
            assert node.cluster_key == expected

    def test_graph_is_deterministic(self, briefs: list[Brief]) -> None:
        assert build_similarity_graph(briefs) == build_similarity_graph(briefs)

    def test_unknown_cluster_mode_raises(self, briefs: list[Brief]) -> None:
        with pytest.raises(MindshareValidationError):
            build_similarity_graph(briefs, cluster_mode="region")

    def test_negative_k_raises(self, briefs: list[Brief]) -> None:
        with pytest.raises(MindshareValidationError):
            build_similarity_graph(briefs, k=-2)

    def test_unjittered_vectors_are_topic_means(self, briefs: list[Brief]) -> None:
        graph = build_similarity_graph(briefs, jitter=False)
        for brief, node in zip(briefs, graph.nodes, strict=True):
            assert node.vector == vector_for_topics(brief.topics)
