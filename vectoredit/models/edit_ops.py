"""Edit operation models for control-point editing."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class EditOp(BaseModel):
    """A single control-point edit on one path."""

    action: Literal["move", "insert", "remove", "join"]
    segment_index: int | None = None  # For move/insert/remove
    point_index: int | None = None  # For move: 0 = start anchor, -1 = end anchor, 1..n = handle
    x: float | None = None  # For move: new position
    y: float | None = None
    t: float = Field(default=0.5, gt=0.0, lt=1.0)  # For insert: split parameter
    selected: list[int] = Field(default_factory=list)  # For join: control point list indices


class EditPlan(BaseModel):
    """Ordered batch of edits applied to one path."""

    path_id: str
    operations: list[EditOp]
