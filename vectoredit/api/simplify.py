"""POST /api/simplify: curve simplification and auto-heal."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from vectoredit.config import Settings
from vectoredit.dependencies import check_path_ids, get_settings, load_document
from vectoredit.engine.simplify import auto_heal_path, simplify_document, simplify_path
from vectoredit.models.requests import HealRequest, SimplifyRequest
from vectoredit.models.responses import SimplifyResponse
from vectoredit.models.svg_document import Document
from vectoredit.svg.serializer import export_svg

router = APIRouter(prefix="/simplify")
logger = logging.getLogger(__name__)


def _response(before: Document, after: Document) -> SimplifyResponse:
    changed = sum(1 for a, b in zip(before.paths, after.paths) if a.segments != b.segments)
    return SimplifyResponse(
        svg=export_svg(after),
        segments_before=sum(len(p.segments) for p in before.paths),
        segments_after=sum(len(p.segments) for p in after.paths),
        paths_simplified=changed,
    )


@router.post("", response_model=SimplifyResponse)
async def simplify(req: SimplifyRequest, settings: Settings = Depends(get_settings)) -> SimplifyResponse:
    doc = load_document(req.svg)
    tolerance = settings.default_tolerance_pct if req.tolerance_pct is None else req.tolerance_pct
    corner_angle = settings.default_corner_angle if req.corner_angle is None else req.corner_angle

    if req.path_ids is None:
        result = simplify_document(
            doc, tolerance, corner_angle, workers=settings.simplify_workers, smooth_joins=req.smooth_joins
        )
    else:
        check_path_ids(doc, req.path_ids)
        selected = set(req.path_ids)
        result = doc.with_paths(
            [
                simplify_path(p, tolerance, corner_angle, smooth_joins=req.smooth_joins) if p.id in selected else p
                for p in doc.paths
            ]
        )
    return _response(doc, result)


@router.post("/heal", response_model=SimplifyResponse)
async def heal(req: HealRequest) -> SimplifyResponse:
    doc = load_document(req.svg)
    if req.path_ids is not None:
        check_path_ids(doc, req.path_ids)
    selected = set(req.path_ids) if req.path_ids is not None else None
    result = doc.with_paths(
        [auto_heal_path(p, req.intensity) if selected is None or p.id in selected else p for p in doc.paths]
    )
    return _response(doc, result)
