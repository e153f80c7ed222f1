"""Cargo feature graph resolution.

Turns a manifest's ``[features]`` table and dependency sections into a graph
of which features enable which features and dependencies, with implicit
features for optional dependencies and hidden helper features inlined away.

Typical use::

    from featgraph.core.features import Resolver

    graph = Resolver().parse(manifest)
    graph["default"].enables_features
    graph.closure("full").dependencies

All public names are re-exported here so that callers can import them from
``featgraph.core.features`` directly.
"""

from featgraph.core.features.models import (
    DEFAULT_FEATURE,
    HIDDEN_PREFIX,
    MAX_INHERITED_PRODUCTS,
    MAX_ITEMS,
    DepAction,
    DepKind,
    Feature,
    FeatureDependency,
    Features,
    ParseDependency,
    TargetKey,
)
from featgraph.core.features.parser import parse_action, parse_feature, parse_features
from featgraph.core.features.implicit import (
    add_dependencies,
    add_dependency,
    classify_dep_syntax,
    manifest_dependencies,
)
from featgraph.core.features.pruning import prune_redundant_dep_features
from featgraph.core.features.linker import link_enabled_by, set_required_by_products
from featgraph.core.features.inliner import inline_feature, is_hidden, remove_hidden_features
from featgraph.core.features.closure import FeatureClosure, compute_closure, merge_closures
from featgraph.core.features.resolver import Resolver

__all__ = [
    "DEFAULT_FEATURE",
    "HIDDEN_PREFIX",
    "MAX_INHERITED_PRODUCTS",
    "MAX_ITEMS",
    "DepAction",
    "DepKind",
    "Feature",
    "FeatureClosure",
    "FeatureDependency",
    "Features",
    "ParseDependency",
    "Resolver",
    "TargetKey",
    "add_dependencies",
    "add_dependency",
    "classify_dep_syntax",
    "compute_closure",
    "inline_feature",
    "is_hidden",
    "link_enabled_by",
    "manifest_dependencies",
    "merge_closures",
    "parse_action",
    "parse_feature",
    "parse_features",
    "prune_redundant_dep_features",
    "remove_hidden_features",
    "set_required_by_products",
]
