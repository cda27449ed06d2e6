"""Similarity graph route: POST /v1/graph."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from mindshare.api.errors import MindshareHttpError
from mindshare.errors import MindshareError
from mindshare.graph.similarity import DEFAULT_NEIGHBOR_COUNT, build_similarity_graph
from mindshare.models.brief import Brief
from mindshare.models.graph import SimilarityGraph
from mindshare.observability.tracing import traced_operation

router = APIRouter(prefix="/v1", tags=["Graph"])


class GraphRequest(BaseModel):
    briefs: list[Brief] = Field(default_factory=list)
    k: int = DEFAULT_NEIGHBOR_COUNT
    cluster_mode: str = "topic"


@router.post("/graph", response_model=SimilarityGraph)
def build_graph(request_body: GraphRequest) -> SimilarityGraph:
    """Build the kNN similarity graph for the supplied briefs."""
    with traced_operation(
        "mindshare.build_similarity_graph",
        {"mindshare.count": len(request_body.briefs), "mindshare.k": request_body.k},
    ):
        try:
            return build_similarity_graph(
                request_body.briefs, k=request_body.k, cluster_mode=request_body.cluster_mode
            )
        except MindshareError as e:
            raise MindshareHttpError.invalid_input(e) from e
