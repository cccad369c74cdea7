# traitsearch/schemas.py
# Purpose: Pydantic models for the runtime config (configs/runtime.yaml) and the
# JSON contracts returned by the search endpoints.

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, PositiveInt, model_validator

from catalog.models import Trait

DEFAULT_FIELD_WEIGHTS: Dict[str, float] = {
    "name": 2,
    "description": 1,
    "tags": 1.5,
    "effects": 1,
}


# --------- Runtime config ---------
class SearchConfig(BaseModel):
    threshold: float = Field(0.3, ge=0.0, le=1.0)
    fields: Dict[str, PositiveFloat] = Field(default_factory=lambda: dict(DEFAULT_FIELD_WEIGHTS))
    default_limit: PositiveInt = 5
    max_limit: PositiveInt = 20
    min_query_length: PositiveInt = 2
    max_query_length: PositiveInt = 50
    ignore_location: bool = True

    @model_validator(mode="after")
    def _check_bounds(self):
        if not self.fields:
            raise ValueError("search.fields must name at least one weighted field")
        if self.default_limit > self.max_limit:
            raise ValueError("search.default_limit must not exceed search.max_limit")
        if self.min_query_length > self.max_query_length:
            raise ValueError("search.min_query_length must not exceed search.max_query_length")
        return self


class EndpointConfig(BaseModel):
    """One trait search endpoint; the variants only differ in these knobs."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    dataset: str
    limit_policy: Literal["clamp", "reject"] = "clamp"
    extended_search: bool = False
    strict_params: bool = True          # length validation + sanitization
    default_limit: Optional[PositiveInt] = None
    max_limit: Optional[PositiveInt] = None


class PerkConfig(BaseModel):
    path: str = "/search"
    dataset: str = "perks.json"
    keys: List[str] = Field(default_factory=lambda: ["name", "description", "tags"])
    threshold: float = Field(0.3, ge=0.0, le=1.0)
    # Perk search favours matches near the start of a value.
    ignore_location: bool = False


class RuntimeConfig(BaseModel):
    search: SearchConfig = Field(default_factory=SearchConfig)
    endpoints: List[EndpointConfig] = Field(default_factory=list)
    perks: Optional[PerkConfig] = None

    @model_validator(mode="after")
    def _unique_endpoints(self):
        names = [e.name for e in self.endpoints]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate endpoint names in runtime config: {names}")
        paths = [e.path for e in self.endpoints]
        if len(paths) != len(set(paths)):
            raise ValueError(f"Duplicate endpoint paths in runtime config: {paths}")
        return self


# --------- Responses ---------
class TraitSearchResponse(BaseModel):
    total: int
    returned: int
    params: Dict[str, Any]
    results: List[Trait]


class ErrorResponse(BaseModel):
    error: str
    message: Optional[str] = None
