"""
Pydantic schemas for the lockdiff API.
"""
from typing import Optional
from pydantic import BaseModel, Field


# ============================================================
# HIGHLIGHT SCHEMAS
# ============================================================

class SegmentSchema(BaseModel):
    text: str
    distinct: bool


class HighlightedLineSchema(BaseModel):
    marker: str
    segments: list[SegmentSchema]


class HighlightSchema(BaseModel):
    removed: HighlightedLineSchema
    added: HighlightedLineSchema


class HighlightRequest(BaseModel):
    """Two canonical package strings to highlight against each other."""
    a: str
    b: str


# ============================================================
# COMPARISON SCHEMAS
# ============================================================

class ComparisonRequest(BaseModel):
    """Request to compare two lockfiles given as raw JSON text."""
    before: str = Field(..., description="Old lockfile contents")
    after: str = Field(..., description="New lockfile contents")
    registry_host: Optional[str] = Field(
        None, description="Registry whose resolved URLs are ignored; defaults to the server setting"
    )


class ChangeSchema(BaseModel):
    change_type: str
    a: Optional[str] = None
    b: Optional[str] = None
    highlight: Optional[HighlightSchema] = None


class HunkSchema(BaseModel):
    section: str
    changes: list[ChangeSchema]


class ComparisonResponse(BaseModel):
    is_identical: bool
    change_count: int
    added_count: int
    removed_count: int
    modified_count: int
    hunks: list[HunkSchema]
    report: str
    before_file: Optional[str] = None
    after_file: Optional[str] = None
