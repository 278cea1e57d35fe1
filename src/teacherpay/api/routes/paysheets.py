"""Paysheet import and lookup endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse

from teacherpay.core.exceptions import UnsupportedFormatError
from teacherpay.importer.file_parser import detect_source_kind
from teacherpay.importer.sample_format import SAMPLE_FILENAME, sample_csv
from teacherpay.models.batch import PayPeriod

router = APIRouter()


@router.post("/paysheets/import")
async def import_paysheet(
    request: Request,
    month: str = Query(..., min_length=1),
    year: str = Query(..., min_length=1),
    filename: str = Query(..., min_length=1),
) -> dict:
    """Import the raw request body as a CSV or Excel paysheet."""
    try:
        kind = detect_source_kind(filename)
    except UnsupportedFormatError as exc:
        raise HTTPException(status_code=415, detail=str(exc)) from exc

    raw = await request.body()
    result = await request.app.state.importer.import_file(raw, kind, PayPeriod(month=month, year=year))
    payload = result.model_dump(mode="json", by_alias=True, exclude={"records"})
    if not result.success:
        raise HTTPException(status_code=422, detail=payload)
    return payload


@router.get("/paysheets/sample", response_class=PlainTextResponse)
async def sample_format() -> PlainTextResponse:
    return PlainTextResponse(
        sample_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{SAMPLE_FILENAME}"'},
    )


@router.get("/paysheets/{period_key}")
async def get_paysheet(period_key: str, request: Request) -> dict:
    batch = await request.app.state.router.read_batch(period_key)
    if batch is None:
        raise HTTPException(status_code=404, detail=f"Paysheet {period_key} not found")
    return batch.to_document()


@router.get("/teachers/{teacher_id}/salary-slips")
async def list_salary_slips(teacher_id: str, request: Request) -> dict:
    slips = await request.app.state.router.list_salary_slips(teacher_id)
    return {
        "teacherId": teacher_id,
        "salarySlips": [slip.to_document() for slip in slips],
    }
