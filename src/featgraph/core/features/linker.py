"""Reverse edges and product requirements.

``enabled_by`` is a derived index. It is rebuilt from scratch from the
forward edges whenever they change, never patched in place by this module.
"""

from __future__ import annotations

from typing import Iterable

from featgraph.core.features.models import Feature
from featgraph.manifest.models import Product


def set_required_by_products(
    features: dict[str, Feature],
    products: Iterable[Product],
    package_name: str,
) -> None:
    """Record which products list each feature in ``required-features``.

    A product without a name is attributed to the package name. Requirements
    naming unknown features are ignored.
    """
    for product in products:
        name = product.name or package_name
        for feature_key in product.required_features:
            feature = features.get(feature_key)
            if feature is not None and name not in feature.required_by_products:
                feature.required_by_products.append(name)


def link_enabled_by(features: dict[str, Feature]) -> None:
    """Recompute ``enabled_by`` for every feature.

    Plain feature edges always count. A dependency action counts too when it
    is unconditional and not ``dep:``-only and the dependency key names a
    feature: ``"foo/bar"`` turns on the implicit feature ``foo``.
    Self-edges are skipped.
    """
    for feature in features.values():
        feature.enabled_by.clear()

    for key, feature in features.items():
        for target in feature.enables_features:
            if target != key and target in features:
                features[target].enabled_by.add(key)
        for dep_key, action in feature.enables_deps.items():
            if action.is_plain and dep_key != key and dep_key in features:
                features[dep_key].enabled_by.add(key)
