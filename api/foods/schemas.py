"""
Pydantic schemas for food lookup endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FoodItem(BaseModel):
    # Only `name` is inspected; everything else rides along untouched.
    model_config = ConfigDict(extra="allow")

    name: str = Field(..., max_length=500)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be blank")
        return value


class FoodLookupOptions(BaseModel):
    resume_url: str | None = Field(default=None, min_length=1, max_length=2000)
