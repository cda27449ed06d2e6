"""Brief filters for the supervisor workspace."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, model_validator

from mindshare.models.brief import AdvisorTenure, Brief, Office, Product, RiskBand


class BriefFilters(BaseModel):
    """Selection criteria; an empty list means "all".

    search_term matches the advisor name and topic keys, case-insensitive.
    compliance_range is inclusive on both ends.
    """

    model_config = ConfigDict(frozen=True)

    offices: list[Office] = Field(default_factory=list)
    products: list[Product] = Field(default_factory=list)
    risks: list[RiskBand] = Field(default_factory=list)
    tenures: list[AdvisorTenure] = Field(default_factory=list)
    search_term: str = ""
    compliance_range: tuple[int, int] = (0, 100)

    @model_validator(mode="after")
    def _validate_range(self) -> BriefFilters:
        lo, hi = self.compliance_range
        if not 0 <= lo <= hi <= 100:
            raise ValueError(f"compliance_range must satisfy 0 <= lo <= hi <= 100, got {lo}, {hi}")
        return self

    def matches(self, brief: Brief) -> bool:
        if self.offices and brief.office not in self.offices:
            return False
        if self.products and brief.product not in self.products:
            return False
        if self.risks and brief.client.risk not in self.risks:
            return False
        if self.tenures and brief.advisor.tenure not in self.tenures:
            return False
        lo, hi = self.compliance_range
        if not lo <= brief.compliance_iq <= hi:
            return False
        if self.search_term:
            haystack = " ".join([brief.advisor.name, *(t.value for t in brief.topics)]).lower()
            if self.search_term.lower() not in haystack:
                return False
        return True

    def apply(self, briefs: Iterable[Brief]) -> list[Brief]:
        return [brief for brief in briefs if self.matches(brief)]


DEFAULT_FILTERS = BriefFilters()
