"""Tests for the read-only manifest model types."""

from __future__ import annotations

import pytest

from featgraph.exceptions import FeatgraphError, InheritedValueError, WorkspaceError
from featgraph.manifest import (
    DetailedDependency,
    InheritedDependency,
    Manifest,
    Package,
    Product,
    SimpleDependency,
    Target,
    require_workspace_root,
)


class TestDependencyVariants:
    """Tests for the uniform accessors across the three dependency shapes."""

    def test_simple(self) -> None:
        dep = SimpleDependency("^1.5")
        assert dep.optional is False
        assert dep.package is None
        assert dep.req_features == []
        assert dep.default_features is True
        assert dep.req() == "^1.5"
        assert dep.detail() is None

    def test_detailed(self) -> None:
        dep = DetailedDependency(
            version="1",
            is_optional=True,
            uses_default_features=False,
            features=("derive", "rc"),
            package_name="serde_core",
        )
        assert dep.optional is True
        assert dep.package == "serde_core"
        assert dep.req_features == ["derive", "rc"]
        assert dep.default_features is False
        assert dep.detail() is dep

    def test_detailed_without_version(self) -> None:
        assert DetailedDependency(path="../local").req() == "*"

    def test_is_crates_io(self) -> None:
        assert DetailedDependency(version="1").is_crates_io
        assert not DetailedDependency(git="https://example.com/x.git").is_crates_io
        assert not DetailedDependency(path="../x").is_crates_io

    def test_inherited(self) -> None:
        dep = InheritedDependency(features=("std",), is_optional=True)
        assert dep.optional is True
        assert dep.req_features == ["std"]
        assert dep.default_features is None
        assert dep.detail() is None

    def test_inherited_req_raises(self) -> None:
        with pytest.raises(InheritedValueError, match="workspace"):
            InheritedDependency().req()

    def test_inherited_error_is_featgraph_error(self) -> None:
        with pytest.raises(FeatgraphError):
            InheritedDependency().req()


class TestPackage:
    """Tests for ``Package``."""

    def test_get_version(self) -> None:
        assert Package(name="x", version="1.2.3").get_version() == "1.2.3"

    def test_inherited_version_raises(self) -> None:
        with pytest.raises(InheritedValueError):
            Package(name="x", version=None).get_version()


class TestManifest:
    """Tests for ``Manifest`` helpers."""

    def test_package_name(self) -> None:
        assert Manifest(package=Package(name="demo")).package_name() == "demo"
        assert Manifest().package_name() == ""

    def test_products_exclude_lib(self) -> None:
        manifest = Manifest(
            lib=Product(name="lib"),
            bin=[Product(name="b")],
            example=[Product(name="e")],
            test=[Product(name="t")],
            bench=[Product(name="k")],
        )
        assert [p.name for p in manifest.products()] == ["b", "e", "t", "k"]

    def test_has_inherited_dependencies(self) -> None:
        assert not Manifest(dependencies={"a": SimpleDependency("1")}).has_inherited_dependencies()
        manifest = Manifest(target={"cfg(unix)": Target(dev_dependencies={"a": InheritedDependency()})})
        assert manifest.has_inherited_dependencies()


class TestRequireWorkspaceRoot:
    """Tests for ``require_workspace_root``."""

    def test_returns_workspace_table(self) -> None:
        table = {"members": ["a", "b"]}
        assert require_workspace_root(Manifest(workspace=table)) is table

    def test_missing_workspace(self) -> None:
        with pytest.raises(WorkspaceError, match=r"\[workspace\]"):
            require_workspace_root(Manifest(package=Package(name="x")))
