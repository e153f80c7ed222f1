"""Feature graph data types.

The graph is stored arena-style: ``Features.features`` maps a feature key to
its :class:`Feature` node, and every edge is a key rather than a reference.
Stages that mutate the graph (implicit-feature synthesis, pruning, hidden
node inlining) look nodes up by key and never hold a node across a removal.

Edge kinds:

- ``Feature.enables_features`` -- plain ``"other"`` actions.
- ``Feature.enables_deps`` -- anything written with ``dep:``, ``?`` or
  ``/``; keyed by the dependency's manifest key.
- ``Feature.enabled_by`` -- the reverse index, derived from the two above.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterator, NamedTuple

from featgraph.manifest.models import Dependency

if TYPE_CHECKING:
    from featgraph.core.features.closure import FeatureClosure


# ---------------------------------------------------------------------------
# Limits and naming conventions
# ---------------------------------------------------------------------------

# Upper bound on features per manifest, actions per feature, and dependencies
# per section. Anything beyond is dropped without an error.
MAX_ITEMS: int = 2048

# Features whose names start with this are implementation details.
HIDDEN_PREFIX: str = "_"

# How many product names a removed hidden feature hands to each successor.
MAX_INHERITED_PRODUCTS: int = 8

DEFAULT_FEATURE: str = "default"


# ---------------------------------------------------------------------------
# DepAction: a feature's effect on one dependency
# ---------------------------------------------------------------------------


@dataclass
class DepAction:
    """How an enabled feature affects a dependency.

    Attributes:
        is_conditional: Written with ``?``: only takes effect if the
            dependency is enabled by something else.
        is_dep_only: Written with ``dep:``: does not imply the
            identically-named implicit feature.
        dep_features: Features of the dependency to turn on (the text after
            ``/``, aggregated over all actions naming the dependency).
    """

    is_conditional: bool = False
    is_dep_only: bool = False
    dep_features: set[str] = field(default_factory=set)

    @property
    def is_plain(self) -> bool:
        """True if the action behaves like a plain feature edge."""
        return not self.is_conditional and not self.is_dep_only

    def merge(self, other: DepAction) -> None:
        """Fold another action on the same dependency into this one.

        An unconditional occurrence wins over a conditional one, a
        dependency-only occurrence wins over a plain one, and the requested
        sub-features are unioned.
        """
        self.is_conditional = self.is_conditional and other.is_conditional
        self.is_dep_only = self.is_dep_only or other.is_dep_only
        self.dep_features |= other.dep_features

    def copy(self) -> DepAction:
        return DepAction(self.is_conditional, self.is_dep_only, set(self.dep_features))


# ---------------------------------------------------------------------------
# Feature: one node of the graph
# ---------------------------------------------------------------------------


@dataclass
class Feature:
    """A feature with all of its resolved edges.

    Attributes:
        key: Name of the feature.
        enables_deps: Dependency actions by dependency manifest key (which
            is not always the crate name).
        enables_features: Keys of features this one turns on.
        enabled_by: Keys of features that turn this one on. Shallow, not
            transitive; recomputed by the linker.
        required_by_products: Names of products (binaries, examples, tests,
            benches) with this feature in ``required-features``.
        explicit: True if declared in ``[features]``, False if implied by an
            optional dependency.
    """

    key: str
    enables_deps: dict[str, DepAction] = field(default_factory=dict)
    enables_features: set[str] = field(default_factory=set)
    enabled_by: set[str] = field(default_factory=set)
    required_by_products: list[str] = field(default_factory=list)
    explicit: bool = True

    def non_default_enabled_by(self) -> list[str]:
        """``enabled_by`` without ``"default"``, sorted."""
        return sorted(k for k in self.enabled_by if k != DEFAULT_FEATURE)

    @property
    def is_referenced(self) -> bool:
        """Is any other feature using this one?"""
        return bool(self.enabled_by)

    @property
    def is_hidden_name(self) -> bool:
        return self.key.startswith(HIDDEN_PREFIX)


# ---------------------------------------------------------------------------
# Dependencies referenced by features
# ---------------------------------------------------------------------------


class DepKind(Enum):
    """Dependency section a declaration comes from."""

    NORMAL = "normal"
    BUILD = "build"
    DEV = "dev"


class TargetKey(NamedTuple):
    """Where a dependency is declared: its section and optional cfg target.

    ``target`` is None for declarations that apply to every platform.
    """

    kind: DepKind
    target: str | None = None


class ParseDependency(NamedTuple):
    """One dependency declaration fed to :meth:`Resolver.parse_custom`.

    Lets callers assemble dependency data from somewhere other than a single
    manifest, e.g. a registry index.

    Attributes:
        key: Manifest key of the dependency, not always the crate name.
        kind: Section the declaration belongs to.
        target: The ``cfg`` of ``[target.'cfg'.dependencies]``, or None.
        dep: The declaration itself.
    """

    key: str
    kind: DepKind
    target: str | None
    dep: Dependency


@dataclass
class FeatureDependency:
    """A dependency that is optional or referenced by some feature.

    Attributes:
        crate_name: Actual crate of the dependency (the ``package`` override
            or the manifest key). Several keys may name the same crate.
        targets: Declarations by :class:`TargetKey`, in registration order.
            The first declaration seen for a key wins.
    """

    crate_name: str
    targets: dict[TargetKey, Dependency] = field(default_factory=dict)

    @property
    def dep(self) -> Dependency:
        """The first registered declaration."""
        return next(iter(self.targets.values()))

    @property
    def kinds(self) -> list[DepKind]:
        """Distinct sections the dependency is declared in, in order."""
        seen: list[DepKind] = []
        for target_key in self.targets:
            if target_key.kind not in seen:
                seen.append(target_key.kind)
        return seen

    def declarations(self, kind: DepKind | None = None) -> Iterator[tuple[TargetKey, Dependency]]:
        for target_key, dep in self.targets.items():
            if kind is None or target_key.kind is kind:
                yield target_key, dep

    def is_optional(self, kind: DepKind | None = None) -> bool:
        """False as soon as one all-platform declaration is non-optional.

        A platform-specific declaration only affects that platform, so it
        does not count when the kind has an all-platform declaration. With
        platform-specific declarations only, the first registered one
        decides.
        """
        decls = list(self.declarations(kind))
        if not decls:
            return False
        general = [dep for key, dep in decls if key.target is None]
        if not general:
            return decls[0][1].optional
        return all(dep.optional for dep in general)

    def only_for_targets(self, kind: DepKind) -> set[str]:
        """Platforms the dependency is restricted to for one section.

        Empty when the section has an all-platform declaration (or none).
        """
        decls = list(self.declarations(kind))
        if any(key.target is None for key, _ in decls):
            return set()
        return {key.target for key, _ in decls if key.target is not None}


# ---------------------------------------------------------------------------
# Features: the resolved graph
# ---------------------------------------------------------------------------


@dataclass
class Features:
    """Result of feature resolution.

    Attributes:
        features: All live features, resolved and normalized.
        dependencies: Dependencies that are optional or referenced by
            features, by manifest key.
        hidden_features: Redirect table for removed hidden features: the
            removed key maps to the features it used to enable.
        removed_hidden_features: True if at least one hidden feature was
            inlined away.
    """

    features: dict[str, Feature] = field(default_factory=dict)
    dependencies: dict[str, FeatureDependency] = field(default_factory=dict)
    hidden_features: dict[str, set[str]] = field(default_factory=dict)
    removed_hidden_features: bool = False

    def __contains__(self, key: object) -> bool:
        return key in self.features

    def __getitem__(self, key: str) -> Feature:
        return self.features[key]

    def get(self, key: str) -> Feature | None:
        return self.features.get(key)

    def resolve_key(self, key: str) -> set[str]:
        """Map a feature key to the live keys it stands for.

        A live key maps to itself. A removed hidden key maps to the live
        features it enabled, following redirects through other removed
        hidden keys. Unknown keys map to the empty set.
        """
        if key in self.features:
            return {key}
        resolved: set[str] = set()
        pending = [key]
        seen: set[str] = set()
        while pending:
            current = pending.pop()
            if current in seen:
                continue
            seen.add(current)
            if current in self.features:
                resolved.add(current)
            else:
                pending.extend(self.hidden_features.get(current, ()))
        return resolved

    def closure(self, key: str) -> FeatureClosure:
        """Everything transitively enabled by ``key``.

        See :func:`featgraph.core.features.closure.compute_closure`. Removed
        hidden keys are followed through ``hidden_features`` first.
        """
        from featgraph.core.features.closure import compute_closure, merge_closures

        if key in self.features or key not in self.hidden_features:
            return compute_closure(self.features, key)
        return merge_closures(
            compute_closure(self.features, live) for live in sorted(self.resolve_key(key))
        )
