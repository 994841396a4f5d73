import copy

import pytest

from core.comparison import (
    Change,
    ChangeType,
    META_SECTION,
    PACKAGES_SECTION,
    compare_meta,
    compare_packages,
    diff_documents,
    diff_lockfiles,
)
from core.errors import MalformedInput, SchemaViolation


def test_identical_documents_have_no_hunks(before_doc):
    result = diff_documents(before_doc, copy.deepcopy(before_doc))
    assert result.hunks == []
    assert result.is_identical
    assert result.change_count == 0


def test_end_to_end_modification_and_addition(before_doc, after_doc):
    result = diff_documents(before_doc, after_doc)

    assert [h.section for h in result.hunks] == [PACKAGES_SECTION]
    changes = result.hunk(PACKAGES_SECTION).changes
    assert changes == [
        Change(a="node_modules/foo: 1.2.3", b="node_modules/foo: 1.3.0"),
        Change(b="node_modules/bar: 2.0.0 (dev)"),
    ]
    assert [c.change_type for c in changes] == [ChangeType.MODIFIED, ChangeType.ADDED]


def test_diff_is_deterministic(before_doc, after_doc):
    first = diff_documents(before_doc, after_doc).to_dict()
    second = diff_documents(before_doc, after_doc).to_dict()
    assert first == second


def test_inputs_untouched(before_doc, after_doc):
    snapshot = copy.deepcopy(before_doc)
    diff_documents(before_doc, after_doc)
    assert before_doc == snapshot


def test_single_package_change_is_suppressed(before_doc):
    after = copy.deepcopy(before_doc)
    after["packages"]["node_modules/foo"]["version"] = "1.2.4"

    result = diff_documents(before_doc, after)

    assert result.hunks == []


def test_two_package_changes_are_reported(before_doc):
    before_doc["packages"]["node_modules/baz"] = {"version": "0.1.0"}
    after = copy.deepcopy(before_doc)
    after["packages"]["node_modules/foo"]["version"] = "1.2.4"
    after["packages"]["node_modules/baz"]["version"] = "0.2.0"

    result = diff_documents(before_doc, after)

    assert len(result.hunk(PACKAGES_SECTION).changes) == 2


def test_meta_only_change():
    before = {"lockfileVersion": 1, "packages": {"": {"name": "x"}}}
    after = {"lockfileVersion": 2, "packages": {"": {"name": "x"}}}

    result = diff_documents(before, after)

    assert len(result.hunks) == 1
    assert result.hunks[0].section == META_SECTION
    assert result.hunks[0].changes == [Change(a="lockfileVersion: 1", b="lockfileVersion: 2")]


def test_meta_fields_in_fixed_order():
    before = {"lockfileVersion": 2, "version": "1.0.0", "name": "a"}
    after = {"lockfileVersion": 3, "version": "1.1.0", "name": "b"}
    assert [c.a for c in compare_meta(before, after)] == [
        "name: a", "version: 1.0.0", "lockfileVersion: 2",
    ]


def test_meta_strict_comparison():
    assert compare_meta({"lockfileVersion": 2}, {"lockfileVersion": "2"}) == [
        Change(a="lockfileVersion: 2", b='lockfileVersion: "2"')
    ]
    assert compare_meta({}, {"name": "a"}) == [Change(a="name: (none)", b="name: a")]
    assert compare_meta({"name": "a"}, {"name": "a"}) == []


def test_change_order_removals_and_modifications_then_additions():
    old = {
        "node_modules/a": {"version": "1.0.0"},
        "node_modules/b": {"version": "1.0.0"},
        "node_modules/c": {"version": "1.0.0"},
    }
    new = {
        "node_modules/z": {"version": "9.0.0"},
        "node_modules/c": {"version": "2.0.0"},
        "node_modules/b": {"version": "1.0.0"},
        "node_modules/y": {"version": "8.0.0"},
    }

    changes = compare_packages(old, new)

    assert changes == [
        Change(a="node_modules/a: 1.0.0"),
        Change(a="node_modules/c: 1.0.0", b="node_modules/c: 2.0.0"),
        Change(b="node_modules/z: 9.0.0"),
        Change(b="node_modules/y: 8.0.0"),
    ]


def test_registry_noise_is_not_a_change(before_doc):
    after = copy.deepcopy(before_doc)
    foo = after["packages"]["node_modules/foo"]
    foo["integrity"] = "sha512-zzzz"
    foo["license"] = "ISC"
    foo["resolved"] = "https://registry.npmjs.org/foo/-/foo-1.2.3.tgz?cache=1"
    after["packages"]["node_modules/extra"] = {"version": "1.0.0"}
    after["packages"]["node_modules/extra2"] = {"version": "1.0.0"}

    result = diff_documents(before_doc, after)

    changes = result.hunk(PACKAGES_SECTION).changes
    assert [c.change_type for c in changes] == [ChangeType.ADDED, ChangeType.ADDED]


def test_private_registry_move_is_a_change(before_doc):
    after = copy.deepcopy(before_doc)
    after["packages"]["node_modules/foo"]["resolved"] = "https://npm.example.com/foo-1.2.3.tgz"
    after["packages"]["node_modules/new"] = {"version": "1.0.0"}

    changes = diff_documents(before_doc, after).hunk(PACKAGES_SECTION).changes

    assert changes[0] == Change(
        a="node_modules/foo: 1.2.3",
        b='node_modules/foo: 1.2.3 (resolved="https://npm.example.com/foo-1.2.3.tgz")',
    )


def test_change_rejects_no_op():
    with pytest.raises(ValueError):
        Change(a="x: 1", b="x: 1")
    with pytest.raises(ValueError):
        Change()


def test_counts(before_doc, after_doc):
    result = diff_documents(before_doc, after_doc)
    assert result.counts() == {"added": 1, "removed": 0, "modified": 1}


def test_diff_lockfiles_parses_text():
    result = diff_lockfiles(
        '{"lockfileVersion": 2, "packages": {}}',
        '{"lockfileVersion": 3, "packages": {}}',
    )
    assert result.hunks[0].section == META_SECTION


def test_diff_lockfiles_malformed_input():
    with pytest.raises(MalformedInput):
        diff_lockfiles('{"packages": {}', '{"packages": {}}')


def test_false_flag_aborts_whole_diff(before_doc):
    after = copy.deepcopy(before_doc)
    after["packages"]["node_modules/foo"]["dev"] = False
    with pytest.raises(SchemaViolation):
        diff_documents(before_doc, after)


def test_nan_metadata_is_malformed_input():
    text = '{"lockfileVersion": NaN, "packages": {}}'
    with pytest.raises(MalformedInput):
        diff_lockfiles(text, text)
