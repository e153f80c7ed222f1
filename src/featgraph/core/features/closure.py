"""Transitive closure of a single feature.

Cargo allows feature cycles (``a = ["b"]``, ``b = ["a"]`` is legal), so the
walk keeps a visited set and never expands a feature twice.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from featgraph.core.features.models import DepAction, Feature


@dataclass
class FeatureClosure:
    """Everything a feature turns on, directly or indirectly.

    Attributes:
        features: Keys of all features reached, including the start.
        dependencies: For every dependency that is unconditionally turned on,
            the ``(feature_key, action)`` pairs that do so, in the order the
            walk discovered them.
    """

    features: set[str] = field(default_factory=set)
    dependencies: dict[str, list[tuple[str, DepAction]]] = field(default_factory=dict)

    def enables_dependency(self, dep_key: str) -> bool:
        return dep_key in self.dependencies

    def dep_features(self, dep_key: str) -> set[str]:
        """Union of sub-features requested on one dependency."""
        names: set[str] = set()
        for _, action in self.dependencies.get(dep_key, ()):
            names |= action.dep_features
        return names


def compute_closure(features: dict[str, Feature], start: str) -> FeatureClosure:
    """Walk everything reachable from ``start``, depth first.

    Feature edges are followed, and so are unconditional, non-``dep:``
    dependency actions whose key names a feature (the implicit feature of an
    optional dependency). Conditional actions are not collected: they only
    apply if the dependency is enabled by something else.

    An unknown ``start`` yields an empty closure.
    """
    closure = FeatureClosure()
    if start not in features:
        return closure

    stack = [start]
    while stack:
        key = stack.pop()
        if key in closure.features:
            continue
        closure.features.add(key)
        feature = features[key]

        for dep_key, action in feature.enables_deps.items():
            if action.is_conditional:
                continue
            closure.dependencies.setdefault(dep_key, []).append((key, action))
            if action.is_plain and dep_key in features and dep_key not in closure.features:
                stack.append(dep_key)

        # Reversed so the lexicographically first successor is expanded first
        for target in sorted(feature.enables_features, reverse=True):
            if target in features and target not in closure.features:
                stack.append(target)
    return closure


def merge_closures(closures: Iterable[FeatureClosure]) -> FeatureClosure:
    """Union several closures, keeping first-discovery order per dependency."""
    merged = FeatureClosure()
    for closure in closures:
        merged.features |= closure.features
        for dep_key, sources in closure.dependencies.items():
            bucket = merged.dependencies.setdefault(dep_key, [])
            for source in sources:
                if source not in bucket:
                    bucket.append(source)
    return merged
