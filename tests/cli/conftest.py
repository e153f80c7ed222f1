"""Shared fixtures for CLI tests.

Provides a Click runner and helpers for writing temporary manifests in
the supported formats (TOML, JSON, YAML) and a few broken ones.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def json_manifest_path(tmp_path: Path, fixture_mapping: dict) -> Path:
    """The reference manifest written as JSON."""
    path = tmp_path / "Cargo.json"
    path.write_text(json.dumps(fixture_mapping))
    return path


@pytest.fixture
def yaml_manifest_path(tmp_path: Path, fixture_mapping: dict) -> Path:
    """The reference manifest written as YAML."""
    path = tmp_path / "Cargo.yaml"
    path.write_text(yaml.safe_dump(fixture_mapping))
    return path


@pytest.fixture
def broken_toml_path(tmp_path: Path) -> Path:
    """A Cargo.toml with a syntax error."""
    path = tmp_path / "Cargo.toml"
    path.write_text("[package\nname = \"broken\"\n")
    return path


@pytest.fixture
def bad_shape_path(tmp_path: Path) -> Path:
    """Valid TOML whose ``[features]`` section has the wrong shape."""
    path = tmp_path / "Cargo.toml"
    path.write_text("features = [\"a\", \"b\"]\n")
    return path
