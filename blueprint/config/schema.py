from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

from .types import ErrorPolicy


class TaskEntry(BaseModel):
    """One item of the ``tasks`` sequence, as written in a blueprint file."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    id: StrictStr = Field(min_length=1)
    command: StrictStr = Field(min_length=1)
    name: Optional[StrictStr] = None
    description: Optional[StrictStr] = None
    color: Optional[StrictStr] = None
    error: Optional[StrictStr] = None

    @field_validator("error")
    @classmethod
    def _check_error(cls, value: str | None) -> str | None:
        if value is not None:
            ErrorPolicy.parse(value)
        return value


class BlueprintDocument(BaseModel):
    """Top-level shape of a blueprint task specification."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: Optional[StrictStr] = None
    tasks: list[TaskEntry] = Field(min_length=1)
