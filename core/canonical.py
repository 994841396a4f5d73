"""
Canonical string form of a lockfile package entry.

Two entries are considered equal exactly when their canonical strings are
equal, so the rendering must not depend on key insertion order.
"""
import json
from typing import Any

from core.errors import SchemaViolation

_JSON_SCALARS = (str, int, float, type(None))


def encode_value(value: Any, path: str = "") -> str:
    """
    JSON-encode a field value compactly.

    Only JSON shapes are accepted; anything else is a SchemaViolation
    rather than being stringified.
    """
    _check_json_shape(value, path)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _check_json_shape(value: Any, path: str):
    if isinstance(value, (bool,) + _JSON_SCALARS):
        return
    if isinstance(value, list):
        for i, item in enumerate(value):
            _check_json_shape(item, f"{path}[{i}]")
        return
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise SchemaViolation(f"{path}: object key {key!r} is not a string")
            _check_json_shape(item, f"{path}.{key}")
        return
    raise SchemaViolation(f"{path}: unsupported value type {type(value).__name__}")


def _format_scalar(value: Any, path: str) -> str:
    if isinstance(value, str):
        return value
    return encode_value(value, path)


def render_field(install_path: str, key: str, value: Any) -> str:
    """Render one extra field as `key` (boolean true) or `key=<json>`."""
    if isinstance(value, bool):
        if not value:
            raise SchemaViolation(
                f"{install_path}: field {key!r} is false; package flags are only ever present and true"
            )
        return key
    return f"{key}={encode_value(value, f'{install_path}.{key}')}"


def canonicalize(install_path: str, entry: dict) -> str:
    """
    Convert one package entry into its canonical representation.

    Examples:
        ("", {"name": "app", "version": "1.0.0"}) -> ": app@1.0.0"
        ("node_modules/a", {"version": "2.1.0", "dev": True}) -> "node_modules/a: 2.1.0 (dev)"

    The entry is not modified.
    """
    parts = [f"{install_path}:"]

    name = entry.get("name")
    version = entry.get("version")
    if name is not None:
        label = _format_scalar(name, f"{install_path}.name")
        if version is not None:
            label += "@" + _format_scalar(version, f"{install_path}.version")
        parts.append(f" {label}")
    elif version is not None:
        parts.append(" " + _format_scalar(version, f"{install_path}.version"))

    extras = [
        render_field(install_path, key, entry[key])
        for key in sorted(entry)
        if key not in ("name", "version")
    ]
    if extras:
        parts.append(f" ({', '.join(extras)})")

    return "".join(parts)
