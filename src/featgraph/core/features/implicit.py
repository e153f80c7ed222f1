"""Dependency registration and implicit features.

An optional dependency ``foo`` implicitly defines a feature ``foo`` that turns
the dependency on, unless some feature refers to it with ``dep:foo``. Cargo
forbids the implicit feature in that case, because the explicit ``dep:`` form
is meant to hide the dependency name from the feature namespace.

The classification must therefore be global: it is computed from every parsed
feature before the first implicit feature is synthesized.
"""

from __future__ import annotations

import logging
from itertools import islice
from typing import Iterable

from featgraph.core.features.models import (
    MAX_ITEMS,
    DepAction,
    DepKind,
    Feature,
    FeatureDependency,
    ParseDependency,
    TargetKey,
)
from featgraph.manifest.models import DepsSet, Manifest

logger = logging.getLogger(__name__)


def classify_dep_syntax(features: dict[str, Feature]) -> dict[str, bool]:
    """Find which dependency keys are referenced with ``dep:`` syntax.

    Returns:
        A map from every dependency key that some feature acts on to True if
        any of those actions is dependency-only, False otherwise. Keys
        absent from the map are not referenced by any feature.
    """
    classified: dict[str, bool] = {}
    for feature in features.values():
        for dep_key, action in feature.enables_deps.items():
            classified[dep_key] = classified.get(dep_key, False) or action.is_dep_only
    return classified


def add_dependency(
    features: dict[str, Feature],
    dependencies: dict[str, FeatureDependency],
    classified: dict[str, bool],
    decl: ParseDependency,
) -> None:
    """Register one dependency declaration and its implicit feature.

    Non-optional dependencies are only tracked when a feature refers to them
    (e.g. ``"serde/derive"``) or they were tracked already. For each
    :class:`TargetKey` the first declaration wins.
    """
    key, kind, target, dep = decl
    is_optional = dep.optional
    referenced = key in classified

    entry = dependencies.get(key)
    if entry is None:
        if not (is_optional or referenced):
            return
        entry = FeatureDependency(crate_name=dep.package or key)
        dependencies[key] = entry
    entry.targets.setdefault(TargetKey(kind, target), dep)

    if is_optional and not classified.get(key, False) and key not in features:
        logger.debug("Synthesizing implicit feature for optional dependency %s", key)
        features[key] = Feature(
            key=key,
            enables_deps={key: DepAction()},
            explicit=False,
        )


def _section(deps: DepsSet, kind: DepKind, target: str | None) -> Iterable[ParseDependency]:
    if len(deps) > MAX_ITEMS:
        logger.debug("Truncating %d %s dependencies to %d", len(deps), kind.value, MAX_ITEMS)
    for key, dep in islice(deps.items(), MAX_ITEMS):
        yield ParseDependency(key, kind, target, dep)


def manifest_dependencies(manifest: Manifest) -> Iterable[ParseDependency]:
    """Yield a manifest's declarations in registration order.

    Normal, build, then per target (normal, build), then dev, then per
    target dev. Since the first declaration wins, the order decides which
    details are kept when a key appears in several sections.
    """
    yield from _section(manifest.dependencies, DepKind.NORMAL, None)
    yield from _section(manifest.build_dependencies, DepKind.BUILD, None)
    for cfg, target in manifest.target.items():
        yield from _section(target.dependencies, DepKind.NORMAL, cfg)
        yield from _section(target.build_dependencies, DepKind.BUILD, cfg)
    yield from _section(manifest.dev_dependencies, DepKind.DEV, None)
    for cfg, target in manifest.target.items():
        yield from _section(target.dev_dependencies, DepKind.DEV, cfg)


def add_dependencies(
    features: dict[str, Feature],
    decls: Iterable[ParseDependency],
) -> dict[str, FeatureDependency]:
    """Register all declarations, synthesizing implicit features.

    Args:
        features: Parsed explicit features; implicit ones are added here.
        decls: Declarations in registration order.

    Returns:
        The tracked dependencies by manifest key.
    """
    classified = classify_dep_syntax(features)
    dependencies: dict[str, FeatureDependency] = {}
    for decl in decls:
        add_dependency(features, dependencies, classified, decl)
    return dependencies
