import pytest

from core.canonical import canonicalize
from core.errors import SchemaViolation


def test_name_and_version():
    assert canonicalize("", {"name": "root", "version": "1.0.0"}) == ": root@1.0.0"


def test_version_only():
    assert canonicalize("node_modules/foo", {"version": "1.2.3"}) == "node_modules/foo: 1.2.3"


def test_no_name_or_version():
    assert canonicalize("packages/a", {}) == "packages/a:"


def test_extras_sorted_with_flags_and_json_values():
    entry = {
        "version": "1.0.0",
        "optional": True,
        "dev": True,
        "resolved": "file:../a",
        "link": True,
    }
    assert canonicalize("node_modules/a", entry) == (
        'node_modules/a: 1.0.0 (dev, link, optional, resolved="file:../a")'
    )


def test_nested_values_are_compact_json():
    entry = {"version": "1.0.0", "peer": {"x": [1, "y"]}}
    assert canonicalize("node_modules/a", entry) == 'node_modules/a: 1.0.0 (peer={"x":[1,"y"]})'


def test_key_order_does_not_matter():
    e1 = {"version": "1.0.0", "dev": True, "resolved": "file:x", "inBundle": True}
    e2 = {"inBundle": True, "resolved": "file:x", "dev": True, "version": "1.0.0"}
    assert canonicalize("node_modules/a", e1) == canonicalize("node_modules/a", e2)


def test_entry_is_not_modified():
    entry = {"name": "a", "version": "1.0.0", "dev": True}
    canonicalize("node_modules/a", entry)
    assert entry == {"name": "a", "version": "1.0.0", "dev": True}


def test_false_flag_is_schema_violation():
    with pytest.raises(SchemaViolation):
        canonicalize("node_modules/a", {"version": "1.0.0", "dev": False})


def test_non_json_value_is_schema_violation():
    with pytest.raises(SchemaViolation):
        canonicalize("node_modules/a", {"version": "1.0.0", "weird": {1, 2}})
