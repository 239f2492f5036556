"""Shared response schemas and validation helpers."""

from collections.abc import Iterable

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str


def reject_explicit_nulls(model: BaseModel, fields: Iterable[str]) -> None:
    """Raise if any of ``fields`` was sent as an explicit ``null``.

    Partial-update schemas make every field optional, but omitting a field
    and clearing a required column are different requests.
    """
    nulled = sorted(f for f in fields if f in model.model_fields_set and getattr(model, f) is None)
    if nulled:
        raise ValueError(f"{', '.join(nulled)} cannot be null")
