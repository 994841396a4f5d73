"""
Lockfile Comparison Engine

Compares two lockfile documents and groups the differences into hunks:
one for top-level metadata and one for package entries. Package entries
are compared by install path through their canonical representation.
"""
import logging
from typing import Any, Optional
from dataclasses import dataclass, field
from enum import Enum
import json

from core.canonical import canonicalize
from core.file_parser import load_document
from core.highlight import Highlight, highlight
from core.normalizer import DEFAULT_REGISTRY_HOST, normalize

logger = logging.getLogger(__name__)

META_FIELDS = ("name", "version", "lockfileVersion")

META_SECTION = "meta"
PACKAGES_SECTION = "packages"

# A packages hunk with a single change is treated as noise
PACKAGES_HUNK_MIN_CHANGES = 2

_MISSING = object()


class ChangeType(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


@dataclass
class Change:
    """
    A single difference between the two documents.

    `a` is the left-hand (old) representation and `b` the right-hand (new)
    one. Only `a` means a removal, only `b` an addition, both a
    modification.
    """
    a: Optional[str] = None
    b: Optional[str] = None

    def __post_init__(self):
        if self.a is None and self.b is None:
            raise ValueError("a change needs at least one side")
        if self.a == self.b:
            raise ValueError(f"not a change: both sides are {self.a!r}")

    @property
    def change_type(self) -> ChangeType:
        if self.a is None:
            return ChangeType.ADDED
        if self.b is None:
            return ChangeType.REMOVED
        return ChangeType.MODIFIED

    def highlight(self) -> Optional[Highlight]:
        """Token highlight for modifications; None for additions and removals."""
        if self.change_type != ChangeType.MODIFIED:
            return None
        return highlight(self.a, self.b)

    def to_dict(self) -> dict:
        result = {"change_type": self.change_type.value}
        if self.a is not None:
            result["a"] = self.a
        if self.b is not None:
            result["b"] = self.b
        return result


@dataclass
class Hunk:
    """A named group of changes."""
    section: str
    changes: list[Change] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "section": self.section,
            "changes": [c.to_dict() for c in self.changes],
        }


@dataclass
class DiffResult:
    """Result of comparing two lockfiles."""
    hunks: list[Hunk] = field(default_factory=list)

    @property
    def is_identical(self) -> bool:
        return not self.hunks

    @property
    def change_count(self) -> int:
        return sum(len(h.changes) for h in self.hunks)

    def hunk(self, section: str) -> Optional[Hunk]:
        for h in self.hunks:
            if h.section == section:
                return h
        return None

    def counts(self) -> dict:
        """Number of changes per change type across all hunks."""
        counts = {t.value: 0 for t in ChangeType}
        for h in self.hunks:
            for c in h.changes:
                counts[c.change_type.value] += 1
        return counts

    def to_dict(self) -> dict:
        return {
            "is_identical": self.is_identical,
            "change_count": self.change_count,
            "hunks": [h.to_dict() for h in self.hunks],
        }


def _format_meta_value(value: Any, quote_strings: bool = False) -> str:
    if value is _MISSING:
        return "(none)"
    if isinstance(value, str) and not quote_strings:
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _strictly_differs(old: Any, new: Any) -> bool:
    # 1 == 1.0 == True in Python; a change of type is still a change
    return type(old) is not type(new) or old != new


def compare_meta(old_doc: dict, new_doc: dict) -> list[Change]:
    """Compare name, version and lockfileVersion, in that order."""
    changes = []
    for key in META_FIELDS:
        old = old_doc.get(key, _MISSING)
        new = new_doc.get(key, _MISSING)
        if not _strictly_differs(old, new):
            continue
        old_text = _format_meta_value(old)
        new_text = _format_meta_value(new)
        if old_text == new_text:
            # 2 and "2" only differ in type; show the quotes
            old_text = _format_meta_value(old, quote_strings=True)
            new_text = _format_meta_value(new, quote_strings=True)
        changes.append(Change(a=f"{key}: {old_text}", b=f"{key}: {new_text}"))
    return changes


def compare_packages(old_packages: dict, new_packages: dict) -> list[Change]:
    """
    Compare two normalized `packages` maps by install path.

    Removals and modifications come first in the old map's order, then
    additions in the new map's order. Unchanged entries produce nothing.
    """
    changes = []
    visited = set()

    for install_path, old_entry in old_packages.items():
        visited.add(install_path)
        old_repr = canonicalize(install_path, old_entry)

        if install_path not in new_packages:
            changes.append(Change(a=old_repr))
            continue

        new_repr = canonicalize(install_path, new_packages[install_path])
        if old_repr != new_repr:
            changes.append(Change(a=old_repr, b=new_repr))

    for install_path, new_entry in new_packages.items():
        if install_path not in visited:
            changes.append(Change(b=canonicalize(install_path, new_entry)))

    return changes


def diff_documents(
    old_doc: dict,
    new_doc: dict,
    registry_host: str = DEFAULT_REGISTRY_HOST
) -> DiffResult:
    """
    Main entry point for comparing two parsed lockfiles.

    Args:
        old_doc: The previous lockfile document, as parsed from JSON
        new_doc: The new lockfile document, as parsed from JSON
        registry_host: Registry whose `resolved` URLs are ignored

    Returns:
        DiffResult with a `meta` hunk and/or a `packages` hunk

    Both documents are normalized here; the inputs are left untouched.
    """
    hunks = []

    meta_changes = compare_meta(old_doc, new_doc)
    if meta_changes:
        hunks.append(Hunk(section=META_SECTION, changes=meta_changes))

    old_norm = normalize(old_doc, registry_host)
    new_norm = normalize(new_doc, registry_host)

    package_changes = compare_packages(old_norm["packages"], new_norm["packages"])
    if len(package_changes) >= PACKAGES_HUNK_MIN_CHANGES:
        hunks.append(Hunk(section=PACKAGES_SECTION, changes=package_changes))
    elif package_changes:
        logger.debug(f"Suppressed lone package change: {package_changes[0].to_dict()}")

    return DiffResult(hunks=hunks)


def diff_lockfiles(
    old_text: str,
    new_text: str,
    registry_host: str = DEFAULT_REGISTRY_HOST
) -> DiffResult:
    """
    Compare two raw lockfile texts.

    Raises:
        MalformedInput: either text is not a JSON object
        SchemaViolation: either document breaks the lockfile shape
    """
    old_doc = load_document(old_text, "before")
    new_doc = load_document(new_text, "after")
    return diff_documents(old_doc, new_doc, registry_host)
