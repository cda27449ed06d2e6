"""Synthetic data routes for the Mindshare API.

POST /v1/universe          - generate a full advisor/brief universe
POST /v1/briefs/generate   - incremental briefs on top of an existing set
POST /v1/briefs/from-form  - one brief from user-entered form fields

The API is stateless: callers send the briefs they already hold.
"""

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from mindshare.api.errors import MindshareHttpError
from mindshare.errors import MindshareError
from mindshare.models.brief import Advisor, Brief
from mindshare.observability.tracing import traced_operation
from mindshare.scoring.engine import ComplianceScorer
from mindshare.scoring.rules import get_rule_set_from_env
from mindshare.synthetic.universe import BriefFormInput, SyntheticUniverse, UniverseBuilder

router = APIRouter(prefix="/v1", tags=["Synthetic"])


class GenerateUniverseRequest(BaseModel):
    seed: str | int
    count: int


class GenerateBriefsRequest(BaseModel):
    seed: str | int
    base_count: int
    n: int
    existing: list[Brief] = Field(default_factory=list)
    advisors: list[Advisor] = Field(
        default_factory=list, description="Universe roster; keeps minted advisor ids unique"
    )


class GenerateBriefsResponse(BaseModel):
    briefs: list[Brief]


class BriefFromFormRequest(BaseModel):
    seed: str | int
    form: BriefFormInput
    existing: list[Brief] = Field(default_factory=list)


def _builder() -> UniverseBuilder:
    try:
        return UniverseBuilder(scorer=ComplianceScorer(get_rule_set_from_env()))
    except MindshareError as e:
        raise MindshareHttpError.invalid_input(e) from e


@router.post("/universe", response_model=SyntheticUniverse)
def generate_universe(request_body: GenerateUniverseRequest, request: Request) -> SyntheticUniverse:
    """Generate a deterministic universe for a seed."""
    builder = _builder()
    with traced_operation(
        "mindshare.generate_universe",
        {
            "mindshare.seed": request_body.seed,
            "mindshare.count": request_body.count,
            "mindshare.rule_set": builder.scorer.rule_set.name,
            "mindshare.request_id": getattr(request.state, "request_id", None),
        },
    ):
        try:
            return builder.build(str(request_body.seed), request_body.count)
        except MindshareError as e:
            raise MindshareHttpError.invalid_input(e) from e


@router.post("/briefs/generate", response_model=GenerateBriefsResponse)
def generate_briefs(request_body: GenerateBriefsRequest, request: Request) -> GenerateBriefsResponse:
    """Generate ``n`` incremental briefs seeded by the existing brief count."""
    builder = _builder()
    with traced_operation(
        "mindshare.add_briefs",
        {
            "mindshare.seed": request_body.seed,
            "mindshare.count": request_body.n,
            "mindshare.request_id": getattr(request.state, "request_id", None),
        },
    ):
        try:
            briefs = builder.add_briefs(
                str(request_body.seed),
                request_body.base_count,
                request_body.existing,
                request_body.n,
                roster=request_body.advisors,
            )
        except MindshareError as e:
            raise MindshareHttpError.invalid_input(e) from e
    return GenerateBriefsResponse(briefs=briefs)


@router.post("/briefs/from-form", response_model=Brief, status_code=201)
def create_brief_from_form(request_body: BriefFromFormRequest, request: Request) -> Brief:
    """Create one brief from form input."""
    builder = _builder()
    with traced_operation(
        "mindshare.create_brief_from_form",
        {
            "mindshare.seed": request_body.seed,
            "mindshare.advisor_id": request_body.form.advisor.id,
            "mindshare.request_id": getattr(request.state, "request_id", None),
        },
    ):
        try:
            return builder.create_brief_from_form(
                str(request_body.seed), request_body.form, request_body.existing
            )
        except MindshareError as e:
            raise MindshareHttpError.invalid_input(e) from e
