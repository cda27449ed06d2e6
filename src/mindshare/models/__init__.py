"""Mindshare domain models: pydantic records for briefs and graph views."""

from mindshare.models.brief import (
    ALL_TOPICS,
    MEETING_LENGTHS,
    Advisor,
    AdvisorTenure,
    AgeBand,
    Brief,
    Channel,
    ClientProfile,
    Coverage,
    Office,
    Product,
    RedlineFlag,
    RiskBand,
    TopicKey,
    coerce_topic,
    coerce_topics,
)
from mindshare.models.graph import ClusterMode, GraphLink, GraphNode, SimilarityGraph

__all__ = [
    "ALL_TOPICS",
    "MEETING_LENGTHS",
    "Advisor",
    "AdvisorTenure",
    "AgeBand",
    "Brief",
    "Channel",
    "ClientProfile",
    "ClusterMode",
    "Coverage",
    "GraphLink",
    "GraphNode",
    "Office",
    "Product",
    "RedlineFlag",
    "RiskBand",
    "SimilarityGraph",
    "TopicKey",
    "coerce_topic",
    "coerce_topics",
]
