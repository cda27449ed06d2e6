"""Similarity graph view models.

Nodes and links are derived, ephemeral objects recomputed on every filter or
cluster-mode change. They are handed to an external renderer.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from mindshare.models.brief import TopicKey


class ClusterMode(StrEnum):
    """Dimension used to group nodes for visualization."""

    TOPIC = "topic"
    OFFICE = "office"
    PRODUCT = "product"


class GraphNode(BaseModel):
    """One visible brief."""

    model_config = ConfigDict(frozen=True)

    id: str
    iq: int = Field(..., ge=0, le=100)
    topics: list[TopicKey]
    weak_topics: list[TopicKey]
    cluster_key: str
    approved: bool
    vector: tuple[float, float]


class GraphLink(BaseModel):
    """Undirected similarity edge between two briefs."""

    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    strength: float = Field(..., ge=0.0, le=1.0)


class SimilarityGraph(BaseModel):
    """Nodes plus the links that survived the similarity threshold."""

    model_config = ConfigDict(frozen=True)

    nodes: list[GraphNode] = Field(default_factory=list)
    links: list[GraphLink] = Field(default_factory=list)
