"""API request models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from vectoredit.models.edit_ops import EditPlan


class DocumentRequest(BaseModel):
    svg: str = Field(..., description="Raw SVG code")


class PathDataRequest(BaseModel):
    d: str = Field(..., description="Path data in the SVG path mini-language")
    path_id: str = Field(default="path", description="Id reported on each control point")


class EditRequest(BaseModel):
    svg: str = Field(..., description="Raw SVG code")
    plan: EditPlan = Field(..., description="Edits to apply to one path, in order")


class SimplifyRequest(BaseModel):
    svg: str = Field(..., description="Raw SVG code")
    tolerance_pct: float | None = Field(
        default=None,
        gt=0,
        description="Tolerance as a percentage of each path's bbox diagonal (server default if omitted)",
    )
    corner_angle: float | None = Field(
        default=None,
        gt=0,
        lt=180,
        description="Turn angle in degrees above which a point is a hard corner",
    )
    path_ids: list[str] | None = Field(default=None, description="Only simplify these paths (all if omitted)")
    smooth_joins: bool = Field(default=True, description="Make handles collinear at smooth cubic joins")


class HealRequest(BaseModel):
    svg: str = Field(..., description="Raw SVG code")
    intensity: Literal["light", "medium", "strong", "extreme"] = Field(
        default="medium", description="Auto-heal intensity preset"
    )
    path_ids: list[str] | None = Field(default=None, description="Only heal these paths (all if omitted)")


class SmartHealRequest(BaseModel):
    svg: str = Field(..., description="Raw SVG code")
    path_id: str = Field(..., description="Path to heal")
    count: int | None = Field(
        default=None, ge=1, description="Anchors to remove (the optimal count if omitted)"
    )


class SmoothRequest(BaseModel):
    svg: str = Field(..., description="Raw SVG code")
    smoothness: float = Field(default=0.3, ge=0, le=1, description="How far handles move toward ideal positions")
    convert_lines: bool = Field(default=False, description="Turn straight segments into curves")
    path_ids: list[str] | None = Field(default=None, description="Only smooth these paths (all if omitted)")
    segment_indices: list[int] | None = Field(
        default=None, description="Only smooth these segments of each selected path"
    )


class MergeRequest(BaseModel):
    svg: str = Field(..., description="Raw SVG code")
    path_ids: list[str] = Field(..., description="Ids of the paths to merge (at least 2)")
    fill_color: str | None = Field(default=None, description="Fill for the merged path")
    close_open_paths: bool = Field(default=False, description="Close open paths before merging")
    simplify_tolerance: float = Field(default=0.0, ge=0, description="Simplify the result (percent, 0 = off)")


class GroupRequest(BaseModel):
    svg: str = Field(..., description="Raw SVG code")
    mode: Literal["color", "proximity"] = Field(default="color", description="Grouping criterion")
    threshold: float | None = Field(
        default=None,
        description="Color: minimum similarity 0-1 (default 0.95). Proximity: max center distance (default 10)",
    )
    merge: bool = Field(default=False, description="Color mode only: merge each group into one path")


class FitRequest(BaseModel):
    svg: str = Field(..., description="Raw SVG code")
    padding: float = Field(default=0.0, ge=0, description="Padding around the content bounds")


class SquareRequest(BaseModel):
    svg: str = Field(..., description="Raw SVG code")
    size: float = Field(default=24.0, gt=0, description="Output viewBox width and height")
    padding: float = Field(default=2.0, ge=0, description="Padding inside the square")
    offset_x: float = Field(default=0.0, description="Manual horizontal nudge after centering")
    offset_y: float = Field(default=0.0, description="Manual vertical nudge after centering")
