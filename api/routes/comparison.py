"""
Comparison routes for lockdiff.

Accepts lockfiles as raw text or uploads and returns the hunks together
with a plain-text report.
"""
from typing import Optional
from fastapi import APIRouter, UploadFile, File, HTTPException

from core import diff_lockfiles, highlight, DiffResult, MalformedInput, SchemaViolation
from api.schemas import (
    ComparisonRequest,
    ComparisonResponse,
    ChangeSchema,
    HunkSchema,
    HighlightRequest,
    HighlightSchema
)
from services.render import render_text
from config import settings

router = APIRouter()


def _run_diff(before: str, after: str, registry_host: Optional[str] = None) -> DiffResult:
    try:
        return diff_lockfiles(before, after, registry_host or settings.DEFAULT_REGISTRY_HOST)
    except MalformedInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SchemaViolation as e:
        raise HTTPException(status_code=422, detail=str(e))


def _build_response(result: DiffResult, **extra) -> ComparisonResponse:
    counts = result.counts()
    hunks = []
    for hunk in result.hunks:
        changes = []
        for c in hunk.changes:
            hl = c.highlight()
            changes.append(ChangeSchema(
                change_type=c.change_type.value,
                a=c.a,
                b=c.b,
                highlight=HighlightSchema(**hl.to_dict()) if hl else None
            ))
        hunks.append(HunkSchema(section=hunk.section, changes=changes))

    return ComparisonResponse(
        is_identical=result.is_identical,
        change_count=result.change_count,
        added_count=counts["added"],
        removed_count=counts["removed"],
        modified_count=counts["modified"],
        hunks=hunks,
        report=render_text(result),
        **extra
    )


@router.post("", response_model=ComparisonResponse)
async def compare_lockfiles(request: ComparisonRequest):
    """
    Compare two lockfiles and return differences.
    """
    result = _run_diff(request.before, request.after, request.registry_host)
    return _build_response(result)


@router.post("/files", response_model=ComparisonResponse)
async def compare_files(
    before_file: UploadFile = File(...),
    after_file: UploadFile = File(...)
):
    """
    Compare two uploaded lockfiles.
    """
    contents = []
    for label, upload in (("before", before_file), ("after", after_file)):
        if not (upload.filename or "").lower().endswith(".json"):
            raise HTTPException(status_code=400, detail=f"{label.capitalize()} file must be JSON")
        raw = await upload.read()
        try:
            contents.append(raw.decode("utf-8-sig"))
        except UnicodeDecodeError as e:
            raise HTTPException(status_code=400, detail=f"{label.capitalize()} file is not UTF-8: {e}")

    result = _run_diff(contents[0], contents[1])
    return _build_response(
        result,
        before_file=before_file.filename,
        after_file=after_file.filename
    )


@router.post("/highlight", response_model=HighlightSchema)
async def get_highlight(request: HighlightRequest):
    """
    Token highlighting for two canonical package strings.
    """
    return HighlightSchema(**highlight(request.a, request.b).to_dict())
