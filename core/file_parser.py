"""
File parsing utilities for lockfile documents.

Lockfiles are plain JSON. Only the top-level shape is checked here;
everything package-related is validated by the normalizer.
"""
import json
from pathlib import Path
from typing import Optional, Union
from dataclasses import dataclass

from core.errors import MalformedInput


@dataclass
class ParsedLockfile:
    """Result of parsing a lockfile document."""
    document: dict
    source: str

    # Extracted metadata from the document
    name: Optional[str] = None
    version: Optional[str] = None
    lockfile_version: Optional[int] = None
    package_count: int = 0


def extract_metadata(document: dict) -> dict:
    """
    Extract the top-level metadata fields from a lockfile document.

    Missing fields come back as None, and `packages` is counted only
    when it is a mapping.
    """
    packages = document.get("packages")
    return {
        "name": document.get("name"),
        "version": document.get("version"),
        "lockfile_version": document.get("lockfileVersion"),
        "package_count": len(packages) if isinstance(packages, dict) else 0,
    }


def load_document(content: Union[str, bytes], source: str = "<input>") -> dict:
    """
    Parse raw lockfile text into a dict.

    Raises MalformedInput when the text is not JSON or its top level
    is not an object.
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise MalformedInput(f"{source}: not valid UTF-8: {e}") from e
    elif content.startswith("\ufeff"):
        content = content[1:]

    def reject_constant(name):
        raise MalformedInput(f"{source}: invalid JSON: {name} is not a JSON value")

    try:
        document = json.loads(content, parse_constant=reject_constant)
    except json.JSONDecodeError as e:
        raise MalformedInput(f"{source}: invalid JSON: {e}") from e

    if not isinstance(document, dict):
        raise MalformedInput(
            f"{source}: expected a JSON object at the top level, got {type(document).__name__}"
        )
    return document


def parse_lockfile_content(content: Union[str, bytes], source: str = "<input>") -> ParsedLockfile:
    """
    Parse lockfile content directly (for API uploads and git revisions).

    Args:
        content: Raw JSON text or UTF-8 bytes
        source: Label used in error messages

    Returns:
        ParsedLockfile object
    """
    document = load_document(content, source)
    return ParsedLockfile(document=document, source=source, **extract_metadata(document))


def parse_lockfile_file(file_path: Union[str, Path]) -> ParsedLockfile:
    """
    Parse a lockfile from disk.

    Raises MalformedInput when the file cannot be read or parsed.
    """
    path = Path(file_path)
    try:
        content = path.read_bytes()
    except OSError as e:
        raise MalformedInput(f"{path}: cannot read file: {e}") from e
    return parse_lockfile_content(content, str(path))
