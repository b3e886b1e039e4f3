"""POST /api/viewbox/*: fit the viewBox to content or normalize into a square."""

from __future__ import annotations

from fastapi import APIRouter

from vectoredit.dependencies import load_document
from vectoredit.models.requests import FitRequest, SquareRequest
from vectoredit.models.responses import SvgResponse
from vectoredit.svg.serializer import export_svg
from vectoredit.svg.viewbox import fit_to_content, square_normalize

router = APIRouter(prefix="/viewbox")


@router.post("/fit", response_model=SvgResponse)
async def fit(req: FitRequest) -> SvgResponse:
    doc = fit_to_content(load_document(req.svg), req.padding)
    return SvgResponse(svg=export_svg(doc), path_count=len(doc.paths))


@router.post("/square", response_model=SvgResponse)
async def square(req: SquareRequest) -> SvgResponse:
    doc = square_normalize(load_document(req.svg), req.size, req.padding, req.offset_x, req.offset_y)
    return SvgResponse(svg=export_svg(doc), path_count=len(doc.paths))
