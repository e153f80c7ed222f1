"""Read-only manifest data types consumed by the feature resolver.

These classes mirror the parts of a ``Cargo.toml`` that feature resolution
reads: the ``[features]`` table, the three dependency sections (global and
per ``[target.'cfg'.*]``), and the build products that can carry
``required-features``. They are plain data holders; producing them from text
is the job of :mod:`featgraph.manifest.loader`.

A dependency declaration is one of three shapes:

- ``"1.0"`` -- :class:`SimpleDependency` (a bare version requirement).
- ``{ version = "1.0", optional = true, ... }`` -- :class:`DetailedDependency`.
- ``{ workspace = true }`` -- :class:`InheritedDependency`, a placeholder that
  workspace inheritance is expected to replace.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterator

from featgraph.exceptions import InheritedValueError, WorkspaceError


# ---------------------------------------------------------------------------
# Dependency: tagged union of the three declaration shapes
# ---------------------------------------------------------------------------


class Dependency(ABC):
    """Common read-only interface over the three dependency shapes."""

    @property
    @abstractmethod
    def optional(self) -> bool:
        """True if the dependency is declared ``optional = true``."""

    @property
    def package(self) -> str | None:
        """Package name override, or None to use the manifest key."""
        return None

    @property
    def req_features(self) -> list[str]:
        """Features of the dependency requested by the declaration."""
        return []

    @property
    def default_features(self) -> bool | None:
        """Whether the dependency's ``default`` feature set is requested.

        None when the answer is not known yet (inherited declarations).
        """
        return True

    @abstractmethod
    def req(self) -> str:
        """Version requirement string.

        Raises:
            InheritedValueError: If the declaration is still inherited.
        """

    def detail(self) -> DetailedDependency | None:
        """Return the detailed form, or None for simple/inherited entries."""
        return None


@dataclass(frozen=True)
class SimpleDependency(Dependency):
    """A dependency declared as a bare version requirement (``"^1.5"``)."""

    version: str

    @property
    def optional(self) -> bool:
        return False

    def req(self) -> str:
        return self.version


@dataclass(frozen=True)
class DetailedDependency(Dependency):
    """A dependency declared as a table of explicit settings.

    Attributes:
        version: Semver requirement, or None when only a locator is given.
        is_optional: ``optional = true``; may create an implicit feature.
        uses_default_features: ``default-features``; defaults to True.
        features: Extra features of the dependency to enable.
        package_name: ``package = "..."`` override of the crate name.
        path: Local path locator.
        registry: Alternative registry alias.
        registry_index: Alternative registry index URL.
        git: Git repository URL.
        branch: Git branch.
        tag: Git tag.
        rev: Git commit.
    """

    version: str | None = None
    is_optional: bool = False
    uses_default_features: bool = True
    features: tuple[str, ...] = ()
    package_name: str | None = None
    path: str | None = None
    registry: str | None = None
    registry_index: str | None = None
    git: str | None = None
    branch: str | None = None
    tag: str | None = None
    rev: str | None = None

    @property
    def optional(self) -> bool:
        return self.is_optional

    @property
    def package(self) -> str | None:
        return self.package_name

    @property
    def req_features(self) -> list[str]:
        return list(self.features)

    @property
    def default_features(self) -> bool | None:
        return self.uses_default_features

    @property
    def is_crates_io(self) -> bool:
        """True unless a path, registry or git locator is set."""
        return not any((
            self.path, self.registry, self.registry_index,
            self.git, self.branch, self.tag, self.rev,
        ))

    def req(self) -> str:
        return self.version or "*"

    def detail(self) -> DetailedDependency | None:
        return self


@dataclass(frozen=True)
class InheritedDependency(Dependency):
    """A ``{ workspace = true }`` dependency awaiting workspace inheritance.

    Only the fields a member manifest may add on top of the workspace
    declaration are known: ``features`` and ``optional``.
    """

    features: tuple[str, ...] = ()
    is_optional: bool = False
    workspace: bool = True

    @property
    def optional(self) -> bool:
        return self.is_optional

    @property
    def req_features(self) -> list[str]:
        return list(self.features)

    @property
    def default_features(self) -> bool | None:
        return None

    def req(self) -> str:
        raise InheritedValueError("value from workspace hasn't been set")


# ---------------------------------------------------------------------------
# Products, targets, package
# ---------------------------------------------------------------------------


@dataclass
class Product:
    """A build product (``[lib]``, ``[[bin]]``, ``[[example]]``, ...).

    Attributes:
        name: Product name. None means "same as the package".
        path: Source path relative to the manifest.
        required_features: Features that must be enabled for the product
            to be built.
        proc_macro: ``proc-macro = true`` (libraries only).
    """

    name: str | None = None
    path: str | None = None
    required_features: list[str] = field(default_factory=list)
    proc_macro: bool = False


DepsSet = dict[str, Dependency]


@dataclass
class Target:
    """Dependencies under one ``[target.'<cfg>']`` table."""

    dependencies: DepsSet = field(default_factory=dict)
    build_dependencies: DepsSet = field(default_factory=dict)
    dev_dependencies: DepsSet = field(default_factory=dict)


@dataclass
class Package:
    """The ``[package]`` table, reduced to what featgraph reads.

    ``version`` is None when it is inherited from a workspace.
    """

    name: str
    version: str | None = "0.0.0"

    def get_version(self) -> str:
        """Return the version, failing if it is still inherited."""
        if self.version is None:
            raise InheritedValueError("value from workspace hasn't been set")
        return self.version


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------


@dataclass
class Manifest:
    """The parts of a ``Cargo.toml`` manifest that feature resolution reads.

    ``features`` preserves declaration order; so does ``target``, which the
    resolver walks in that order when registering per-target dependencies.
    """

    package: Package | None = None
    workspace: dict[str, Any] | None = None
    features: dict[str, list[str]] = field(default_factory=dict)
    dependencies: DepsSet = field(default_factory=dict)
    build_dependencies: DepsSet = field(default_factory=dict)
    dev_dependencies: DepsSet = field(default_factory=dict)
    target: dict[str, Target] = field(default_factory=dict)
    lib: Product | None = None
    bin: list[Product] = field(default_factory=list)
    example: list[Product] = field(default_factory=list)
    test: list[Product] = field(default_factory=list)
    bench: list[Product] = field(default_factory=list)

    def package_name(self) -> str:
        """Package name, or an empty string for virtual manifests."""
        return self.package.name if self.package else ""

    def products(self) -> Iterator[Product]:
        """Yield every product that can declare ``required-features``.

        Libraries are excluded: Cargo ignores ``required-features`` on them.
        """
        yield from self.bin
        yield from self.example
        yield from self.test
        yield from self.bench

    def has_inherited_dependencies(self) -> bool:
        """True if any dependency is still a workspace placeholder."""
        sections = [self.dependencies, self.build_dependencies, self.dev_dependencies]
        for target in self.target.values():
            sections.extend(
                [target.dependencies, target.build_dependencies, target.dev_dependencies]
            )
        return any(
            isinstance(dep, InheritedDependency)
            for section in sections
            for dep in section.values()
        )


def require_workspace_root(manifest: Manifest) -> dict[str, Any]:
    """Return the ``[workspace]`` table of a manifest expected to be a root.

    Raises:
        WorkspaceError: If the manifest has no ``[workspace]`` table.
    """
    if manifest.workspace is None:
        raise WorkspaceError("manifest doesn't have [workspace]")
    return manifest.workspace
