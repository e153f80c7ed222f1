"""Feature resolution pipeline.

:class:`Resolver` runs the stages in order over one manifest snapshot:

1. parse ``[features]`` actions (:mod:`.parser`);
2. classify ``dep:`` usage and register dependencies, synthesizing implicit
   features for optional ones (:mod:`.implicit`);
3. drop redundant dependency sub-feature requests (:mod:`.pruning`);
4. record product requirements and link ``enabled_by`` (:mod:`.linker`);
5. inline hidden features (:mod:`.inliner`).

The result is a fresh :class:`Features` graph; the manifest is only read.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence

from featgraph.core.features.implicit import add_dependencies, manifest_dependencies
from featgraph.core.features.inliner import KeepHidden, remove_hidden_features
from featgraph.core.features.linker import link_enabled_by, set_required_by_products
from featgraph.core.features.models import Feature, FeatureDependency, Features, ParseDependency
from featgraph.core.features.parser import parse_features
from featgraph.core.features.pruning import prune_redundant_dep_features
from featgraph.manifest.models import Manifest

logger = logging.getLogger(__name__)


class Resolver:
    """Builds the normalized feature graph of a manifest.

    Args:
        keep_hidden: Receives feature names starting with ``_`` and returns
            True for those that should be kept instead of inlined.
        prune_redundant: Drop ``dep/feature`` requests that the dependency
            declaration already makes (default True).
    """

    def __init__(
        self,
        keep_hidden: KeepHidden = None,
        prune_redundant: bool = True,
    ) -> None:
        self._keep_hidden = keep_hidden
        self._prune_redundant = prune_redundant

    def parse(self, manifest: Manifest) -> Features:
        """Resolve the features of a manifest.

        Dependencies still awaiting workspace inheritance are read as far as
        they are known (``optional`` and ``features``).
        """
        if manifest.has_inherited_dependencies():
            logger.debug(
                "Manifest %s has dependencies awaiting workspace inheritance",
                manifest.package_name() or "<virtual>",
            )
        features = parse_features(manifest.features)
        dependencies = add_dependencies(features, manifest_dependencies(manifest))
        set_required_by_products(features, manifest.products(), manifest.package_name())
        return self._finish(features, dependencies)

    def parse_custom(
        self,
        manifest_features: Mapping[str, Sequence[str]],
        deps: Iterable[ParseDependency],
    ) -> Features:
        """Resolve from a bare ``[features]`` table and dependency stream.

        Use this when dependency data doesn't come from a single manifest,
        e.g. from a registry index. ``deps`` is consumed in order and the
        first declaration per (key, kind, target) wins. Product requirements
        are not available here, so ``required_by_products`` stays empty.
        """
        features = parse_features(manifest_features)
        dependencies = add_dependencies(features, deps)
        return self._finish(features, dependencies)

    def _finish(
        self,
        features: dict[str, Feature],
        dependencies: dict[str, FeatureDependency],
    ) -> Features:
        if self._prune_redundant:
            prune_redundant_dep_features(features, dependencies)
        link_enabled_by(features)
        hidden = remove_hidden_features(features, self._keep_hidden)
        return Features(
            features=features,
            dependencies=dependencies,
            hidden_features=hidden,
            removed_hidden_features=bool(hidden),
        )
