"""FastAPI dependency injection and shared request helpers."""

from __future__ import annotations

from fastapi import HTTPException

from vectoredit.config import Settings, settings
from vectoredit.errors import InvalidCommand, MalformedDocument
from vectoredit.models.svg_document import Document, Path
from vectoredit.svg.parser import parse_svg


def get_settings() -> Settings:
    return settings


def load_document(svg: str) -> Document:
    """Parse request SVG, turning parse failures into 422 responses."""
    try:
        return parse_svg(svg)
    except (MalformedDocument, InvalidCommand) as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


def find_path(document: Document, path_id: str) -> Path:
    try:
        return document.get_path(path_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=f"Unknown path id: {path_id}") from e


def check_path_ids(document: Document, path_ids: list[str]) -> None:
    known = {p.id for p in document.paths}
    missing = [pid for pid in path_ids if pid not in known]
    if missing:
        raise HTTPException(status_code=404, detail=f"Unknown path ids: {', '.join(missing)}")
