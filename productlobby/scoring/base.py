"""Pydantic base schema for calculator inputs and results."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """
    Base Pydantic model for all scoring schemas.

    Configures common Pydantic behaviors:
    - ``populate_by_name=True``: Allow initialization by alias or field name.
    - ``extra="forbid"``: Reject unknown fields so a misspelt input never silently scores as zero.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
    )
