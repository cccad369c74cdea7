# catalog/models.py
# Purpose: Pydantic models for the bundled catalog records (traits and perks).
# Records are frozen once loaded; unknown keys from the data files are kept as extras.

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Effect(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    type: str
    value: Union[str, int, float]
    scope: Optional[Union[str, List[str]]] = None
    condition: Optional[str] = None
    duration: Optional[str] = None
    stacks: Optional[int] = None
    note: Optional[str] = None


class Trait(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    name: str = Field(..., min_length=1)
    tags: List[str] = Field(default_factory=list)
    description: str = ""
    effects: List[Effect] = Field(default_factory=list)


class Perk(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    name: str = Field(..., min_length=1)
    description: str = ""
    tags: List[str] = Field(default_factory=list)
