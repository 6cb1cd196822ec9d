"""API routes for sheetbind."""

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ..engine import ForwardBinder, ReverseBinder
from ..placeholders import ReferenceScanner
from ..sheets import InvalidAddressError, Workbook, WorkbookData

router = APIRouter()


class ForwardRequest(BaseModel):
    """Request to populate a workbook template."""

    workbook: WorkbookData
    query_results: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)


class ForwardResponse(BaseModel):
    """Populated workbook."""

    workbook: WorkbookData


class ReverseRequest(BaseModel):
    """Request to generate statements from a workbook."""

    workbook: WorkbookData
    templates: list[str]


class ReverseResponse(BaseModel):
    """Generated statements."""

    statements: list[str]
    count: int


class ReferencesRequest(BaseModel):
    """Request to preview the cell references of templates."""

    templates: list[str]


@router.get("/health")
async def health_check():
    """Health check endpoint with diagnostics."""
    from .. import __version__
    from ..config import settings

    return {
        "status": "ok",
        "service": "sheetbind",
        "version": __version__,
        "config": {
            "google_credentials_configured": settings.google_credentials_path.exists(),
        },
    }


@router.post("/forward", response_model=ForwardResponse)
async def bind_forward(request: ForwardRequest):
    """Populate a workbook template with query results."""
    try:
        template = Workbook.from_data(request.workbook)
        result = ForwardBinder().bind(template, request.query_results)
    except (InvalidAddressError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ForwardResponse(workbook=result.to_data())


@router.post("/reverse", response_model=ReverseResponse)
async def bind_reverse(request: ReverseRequest):
    """Generate statements from a populated workbook."""
    try:
        workbook = Workbook.from_data(request.workbook)
        statements = ReverseBinder().bind(workbook, request.templates)
    except (InvalidAddressError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ReverseResponse(statements=statements, count=len(statements))


@router.post("/references")
async def preview_references(request: ReferencesRequest):
    """List the cell references found in each template, with validation."""
    scanner = ReferenceScanner()
    return {
        "templates": [
            {
                "template": template,
                "references": [
                    reference.model_dump() | {"is_range": reference.is_range}
                    for reference in scanner.extract_cell_references(template)
                ],
                "validation": scanner.validate_template(template).model_dump(),
            }
            for template in request.templates
        ]
    }
