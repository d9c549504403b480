from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class FilterSelectionsModel(BaseModel):
    states: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    stores: List[str] = Field(default_factory=list)
    brands: List[str] = Field(default_factory=list)
