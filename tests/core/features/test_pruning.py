"""Tests for redundant dependency sub-feature pruning."""

from __future__ import annotations

from featgraph.core.features import (
    DepKind,
    ParseDependency,
    add_dependencies,
    parse_features,
    prune_redundant_dep_features,
)
from featgraph.manifest import DetailedDependency, InheritedDependency, SimpleDependency


def _resolve(declared: dict[str, list[str]], *decls: ParseDependency):
    features = parse_features(declared)
    deps = add_dependencies(features, decls)
    removed = prune_redundant_dep_features(features, deps)
    return features, removed


def _normal(key: str, dep, target: str | None = None) -> ParseDependency:
    return ParseDependency(key, DepKind.NORMAL, target, dep)


class TestPruneRedundant:
    """Tests for ``prune_redundant_dep_features``."""

    def test_default_dropped_when_default_features_on(self) -> None:
        features, removed = _resolve(
            {"f": ["serde/default", "serde/std"]}, _normal("serde", SimpleDependency("1"))
        )
        assert features["f"].enables_deps["serde"].dep_features == {"std"}
        assert removed == 1

    def test_default_kept_when_default_features_off(self) -> None:
        dep = DetailedDependency(version="1", uses_default_features=False)
        features, removed = _resolve({"f": ["serde/default"]}, _normal("serde", dep))
        assert features["f"].enables_deps["serde"].dep_features == {"default"}
        assert removed == 0

    def test_declared_features_dropped(self) -> None:
        dep = DetailedDependency(version="1", features=("derive",))
        features, _ = _resolve({"f": ["serde/derive", "serde/rc"]}, _normal("serde", dep))
        assert features["f"].enables_deps["serde"].dep_features == {"rc"}

    def test_action_survives_with_empty_sub_features(self) -> None:
        """Pruning never removes the dependency action itself."""
        dep = DetailedDependency(version="1", features=("derive",))
        features, _ = _resolve({"f": ["serde/derive"]}, _normal("serde", dep))
        action = features["f"].enables_deps["serde"]
        assert action.dep_features == set()
        assert action.is_conditional is False

    def test_only_names_requested_by_every_declaration(self) -> None:
        general = DetailedDependency(version="1", features=("std",))
        unix = DetailedDependency(version="1", uses_default_features=False)
        features, _ = _resolve(
            {"f": ["serde/std", "serde/default"]},
            _normal("serde", general),
            _normal("serde", unix, "cfg(unix)"),
        )
        assert features["f"].enables_deps["serde"].dep_features == {"std", "default"}

    def test_inherited_default_unknown(self) -> None:
        dep = InheritedDependency(features=("std",))
        features, _ = _resolve({"f": ["serde/default", "serde/std"]}, _normal("serde", dep))
        assert features["f"].enables_deps["serde"].dep_features == {"default"}

    def test_untracked_dependency_untouched(self) -> None:
        features, removed = _resolve({"f": ["ghost/default"]})
        assert features["f"].enables_deps["ghost"].dep_features == {"default"}
        assert removed == 0
