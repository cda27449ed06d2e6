"""Compliance scoring route: POST /v1/score."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from mindshare.api.errors import MindshareHttpError
from mindshare.errors import MindshareError
from mindshare.observability.tracing import traced_operation
from mindshare.scoring.engine import ComplianceScore, score_text
from mindshare.scoring.rules import get_rule_set_from_env

router = APIRouter(prefix="/v1", tags=["Scoring"])


class ScoreRequest(BaseModel):
    text: str
    explicit_topics: list[str] = Field(default_factory=list)


@router.post("/score", response_model=ComplianceScore)
def score(request_body: ScoreRequest) -> ComplianceScore:
    """Score text for topic coverage, redline flags and compliance IQ.

    Unknown topic keys are rejected with 400 INVALID_INPUT.
    """
    try:
        rule_set = get_rule_set_from_env()
        with traced_operation(
            "mindshare.score_text",
            {"mindshare.rule_set": rule_set.name, "mindshare.topics": request_body.explicit_topics},
        ):
            return score_text(request_body.text, request_body.explicit_topics, rule_set=rule_set)
    except MindshareError as e:
        raise MindshareHttpError.invalid_input(e) from e
