"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    stages_registered: int = 0


class PathSummary(BaseModel):
    id: str
    d: str
    segment_count: int
    closed: bool = False
    fill: str | None = None
    stroke: str | None = None


class DocumentResponse(BaseModel):
    width: float
    height: float
    view_box: list[float] | None = None
    paths: list[PathSummary] = Field(default_factory=list)


class SvgResponse(BaseModel):
    svg: str
    path_count: int = 0


class ControlPointModel(BaseModel):
    path_id: str
    segment_index: int
    point_index: int
    x: float
    y: float
    kind: str


class ControlPointsResponse(BaseModel):
    points: list[ControlPointModel] = Field(default_factory=list)
    segment_count: int = 0


class EditResponse(BaseModel):
    svg: str
    path: PathSummary


class SimplifyResponse(BaseModel):
    svg: str
    segments_before: int = 0
    segments_after: int = 0
    paths_simplified: int = 0


class MergeResponse(BaseModel):
    svg: str
    merged_count: int = 0
    path_count: int = 0


class GroupResponse(BaseModel):
    groups: list[list[str]] = Field(default_factory=list)
    svg: str | None = None
    merged_count: int = 0


class PathAnalysisModel(BaseModel):
    id: str
    point_count: int
    path_length: float
    point_density: float
    complexity: str
    estimated_size: int
    recommendations: list[str] = Field(default_factory=list)


class AnalysisResponse(BaseModel):
    total_points: int
    total_paths: int
    estimated_file_size: int
    optimal_file_size: int
    savings_potential: int
    average_complexity: float
    health_percentage: int
    paths: list[PathAnalysisModel] = Field(default_factory=list)
