"""Shared fixtures for featgraph tests."""

import copy
import pathlib

import pytest

from featgraph.manifest import Manifest, manifest_from_mapping

# Hidden-feature chain, dep: syntax, implicit features, and products gating
# on both a real and a hidden feature.
FIXTURE_TOML = """\
[package]
name = "fixture"
version = "0.1.0"

[features]
default = ["x"]
a = []
b = ["a", "implied_referenced/with_feature"]
c = []
x = ["__hidden", "c", "not_optional/f3"]
__hidden = ["__hidden2"]
__hidden2 = ["dep:depend", "a"]

[dependencies]
not_optional = "1.0"
depend = { version = "1.0", optional = true }
implied_referenced = { version = "1.0", optional = true }
implied_standalone = { version = "1.0", optional = true }

[[bin]]
name = "tool"
required-features = ["x"]

[[example]]
name = "demo"
required-features = ["__hidden"]
"""

FIXTURE_MAPPING = {
    "package": {"name": "fixture", "version": "0.1.0"},
    "features": {
        "default": ["x"],
        "a": [],
        "b": ["a", "implied_referenced/with_feature"],
        "c": [],
        "x": ["__hidden", "c", "not_optional/f3"],
        "__hidden": ["__hidden2"],
        "__hidden2": ["dep:depend", "a"],
    },
    "dependencies": {
        "not_optional": "1.0",
        "depend": {"version": "1.0", "optional": True},
        "implied_referenced": {"version": "1.0", "optional": True},
        "implied_standalone": {"version": "1.0", "optional": True},
    },
    "bin": [{"name": "tool", "required-features": ["x"]}],
    "example": [{"name": "demo", "required-features": ["__hidden"]}],
}


@pytest.fixture
def fixture_manifest() -> Manifest:
    """The reference manifest as a model object."""
    return manifest_from_mapping(FIXTURE_MAPPING)


@pytest.fixture
def fixture_manifest_path(tmp_path: pathlib.Path) -> pathlib.Path:
    """The reference manifest written to a temporary Cargo.toml."""
    path = tmp_path / "Cargo.toml"
    path.write_text(FIXTURE_TOML)
    return path


@pytest.fixture
def fixture_mapping() -> dict:
    """A fresh copy of the reference manifest as a plain mapping."""
    return copy.deepcopy(FIXTURE_MAPPING)
