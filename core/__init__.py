# Lockdiff v1.0.0
"""
Core package for the lockfile diff engine.
Contains normalization, canonicalization, comparison and highlighting.
"""
from core.errors import (
    LockdiffError,
    MalformedInput,
    SchemaViolation
)
from core.normalizer import (
    normalize,
    normalize_entry,
    is_default_registry_url,
    DEFAULT_REGISTRY_HOST,
    NOISE_FIELDS
)
from core.canonical import (
    canonicalize,
    encode_value
)
from core.comparison import (
    diff_documents,
    diff_lockfiles,
    compare_meta,
    compare_packages,
    Change,
    ChangeType,
    DiffResult,
    Hunk,
    META_SECTION,
    PACKAGES_SECTION
)
from core.highlight import (
    highlight,
    tokenize,
    Highlight,
    HighlightedLine,
    Segment
)
from core.file_parser import (
    parse_lockfile_content,
    parse_lockfile_file,
    load_document,
    extract_metadata,
    ParsedLockfile
)

__all__ = [
    "LockdiffError",
    "MalformedInput",
    "SchemaViolation",
    "normalize",
    "normalize_entry",
    "is_default_registry_url",
    "DEFAULT_REGISTRY_HOST",
    "NOISE_FIELDS",
    "canonicalize",
    "encode_value",
    "diff_documents",
    "diff_lockfiles",
    "compare_meta",
    "compare_packages",
    "Change",
    "ChangeType",
    "DiffResult",
    "Hunk",
    "META_SECTION",
    "PACKAGES_SECTION",
    "highlight",
    "tokenize",
    "Highlight",
    "HighlightedLine",
    "Segment",
    "parse_lockfile_content",
    "parse_lockfile_file",
    "load_document",
    "extract_metadata",
    "ParsedLockfile"
]
