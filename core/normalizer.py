"""
Lockfile normalization.

Removes fields that change on every regeneration or that have no effect on
what gets installed, so two lockfiles can be compared entry by entry.
The input document is never modified; a normalized copy is returned.
"""
import logging
from typing import Any
from urllib.parse import urlparse

from core.errors import SchemaViolation

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_HOST = "registry.npmjs.org"

# Nested dependency tree from lockfileVersion 1, superseded by `packages`
LEGACY_TREE_FIELD = "dependencies"

NOISE_FIELDS = frozenset({
    # Irrelevant to what gets installed
    "license",
    "engines",
    "workspaces",
    "dependencies",
    "devDependencies",
    "peerDependencies",
    "peerDependenciesMeta",
    "optionalDependencies",
    "deprecated",
    "cpu",
    "os",
    "funding",
    "bin",
    # Unreliable between regenerations
    "hasInstallScript",
    "integrity",
})


def is_default_registry_url(value: Any, registry_host: str = DEFAULT_REGISTRY_HOST) -> bool:
    """
    Check whether a `resolved` value points at the default registry.

    Anything that does not parse as an absolute URL with a scheme and a
    hostname (local paths, scheme-relative "//host/..." values, git specs,
    garbage) is treated as not the default registry.
    """
    if not isinstance(value, str):
        return False
    try:
        parsed = urlparse(value)
        hostname = parsed.hostname
    except ValueError:
        logger.debug(f"Keeping unparsable resolved URL: {value!r}")
        return False
    if not parsed.scheme:
        return False
    return hostname is not None and hostname == registry_host.lower()


def normalize_entry(entry: dict, registry_host: str = DEFAULT_REGISTRY_HOST) -> dict:
    """Return a copy of a package entry without its noise fields."""
    normalized = {}
    for key, value in entry.items():
        if key in NOISE_FIELDS:
            continue
        if key == "resolved" and is_default_registry_url(value, registry_host):
            continue
        normalized[key] = value
    return normalized


def normalize(document: dict, registry_host: str = DEFAULT_REGISTRY_HOST) -> dict:
    """
    Build a normalized copy of a lockfile document.

    Top-level fields are kept except the legacy dependency tree; every
    entry under `packages` is passed through normalize_entry.

    Raises:
        SchemaViolation: `packages` is missing, is not a mapping, or
            contains an entry that is not a mapping
    """
    packages = document.get("packages")
    if packages is None:
        raise SchemaViolation(
            "lockfile has no 'packages' map (lockfileVersion 1 documents are not supported)"
        )
    if not isinstance(packages, dict):
        raise SchemaViolation(
            f"'packages' must be an object, got {type(packages).__name__}"
        )

    normalized_packages = {}
    for install_path, entry in packages.items():
        if not isinstance(entry, dict):
            raise SchemaViolation(
                f"package entry {install_path!r} must be an object, got {type(entry).__name__}"
            )
        normalized_packages[install_path] = normalize_entry(entry, registry_host)

    normalized = {
        key: value
        for key, value in document.items()
        if key not in (LEGACY_TREE_FIELD, "packages")
    }
    normalized["packages"] = normalized_packages
    return normalized
