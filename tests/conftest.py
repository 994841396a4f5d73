"""
Test bootstrap: puts the repository root on sys.path so the top-level
packages import the same way they do when run from a checkout.
"""
import copy
import json
import os
import sys

import pytest

_HERE = os.path.dirname(os.path.abspath(__file__))
_ROOT = os.path.abspath(os.path.join(_HERE, os.pardir))
if _ROOT not in sys.path:
    sys.path.insert(0, _ROOT)


BEFORE = {
    "name": "root",
    "version": "1.0.0",
    "lockfileVersion": 3,
    "requires": True,
    "packages": {
        "": {"name": "root", "version": "1.0.0", "dependencies": {"foo": "^1.2.0"}},
        "node_modules/foo": {
            "version": "1.2.3",
            "resolved": "https://registry.npmjs.org/foo/-/foo-1.2.3.tgz",
            "integrity": "sha512-aaaa",
            "license": "MIT",
        },
    },
}


@pytest.fixture
def before_doc():
    return copy.deepcopy(BEFORE)


@pytest.fixture
def after_doc():
    doc = copy.deepcopy(BEFORE)
    doc["packages"]["node_modules/foo"].update({
        "version": "1.3.0",
        "resolved": "https://registry.npmjs.org/foo/-/foo-1.3.0.tgz",
        "integrity": "sha512-bbbb",
    })
    doc["packages"]["node_modules/bar"] = {
        "version": "2.0.0",
        "resolved": "https://registry.npmjs.org/bar/-/bar-2.0.0.tgz",
        "integrity": "sha512-cccc",
        "dev": True,
    }
    return doc


@pytest.fixture
def write_lockfile(tmp_path):
    def _write(doc, name="package-lock.json"):
        path = tmp_path / name
        path.write_text(json.dumps(doc, indent=2), encoding="utf-8")
        return path
    return _write
