"""Shared pydantic base for sheet models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SheetModel(BaseModel):
    """Base class for all persisted sheet models.

    Models are frozen so a document can only change by producing a new
    one. Attributes are snake_case in Python and camelCase on the wire;
    both spellings are accepted on input.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json_dict(self) -> dict:
        """Dump to a JSON-compatible dict using wire (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True)
