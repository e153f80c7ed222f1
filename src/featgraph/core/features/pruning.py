"""Drop dependency sub-feature requests that the declaration already makes.

``serde/std`` in a feature is redundant when ``[dependencies]`` already says
``serde = { features = ["std"] }``, and so is ``serde/default`` unless the
declaration turns ``default-features`` off. Removing these only makes the
graph less noisy; it changes no enablement decision.
"""

from __future__ import annotations

from featgraph.core.features.models import DEFAULT_FEATURE, Feature, FeatureDependency


def _always_requested(dep: FeatureDependency) -> set[str]:
    """Sub-features requested by every declaration of the dependency."""
    requested: set[str] | None = None
    for _, decl in dep.declarations():
        names = set(decl.req_features)
        if decl.default_features:
            names.add(DEFAULT_FEATURE)
        requested = names if requested is None else requested & names
    return requested or set()


def prune_redundant_dep_features(
    features: dict[str, Feature],
    dependencies: dict[str, FeatureDependency],
) -> int:
    """Remove redundant ``dep_features`` entries in place.

    A name is only dropped when every declaration of the dependency already
    requests it, so platform- or section-specific declarations that differ
    keep their explicit requests.

    Returns:
        Number of sub-feature entries removed.
    """
    removed = 0
    for feature in features.values():
        for dep_key, action in feature.enables_deps.items():
            if not action.dep_features or dep_key not in dependencies:
                continue
            redundant = action.dep_features & _always_requested(dependencies[dep_key])
            if redundant:
                action.dep_features -= redundant
                removed += len(redundant)
    return removed
