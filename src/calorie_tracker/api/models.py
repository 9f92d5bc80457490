"""Pydantic models for inbound request bodies.

Fields are left loosely typed; coercion and validation happen in
calorie_tracker.domain.validation so every rule lives in one place.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LogRequestBody(BaseModel):
    """Body of POST /log."""

    model_config = ConfigDict(extra="ignore")

    date: Any = None
    meal_type: Any = None
    source: Any = None
    raw_text: Any = None
    items: Any = None


class UpdateRequestBody(BaseModel):
    """Body of POST /update."""

    model_config = ConfigDict(extra="ignore")

    entry_id: Any = None
    updates: Any = Field(default_factory=dict)


class DeleteRequestBody(BaseModel):
    """Body of POST /delete."""

    model_config = ConfigDict(extra="ignore")

    entry_id: Any = None


class RepairRequestBody(BaseModel):
    """Body of POST /repair."""

    model_config = ConfigDict(extra="ignore")

    start: Any = None
    end: Any = None
