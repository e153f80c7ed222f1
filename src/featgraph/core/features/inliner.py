"""Inline hidden features out of the graph.

Crates often declare helper features such as ``__internal`` or ``_tls_base``
that users are not meant to enable directly. This module contracts those
nodes away: each predecessor takes over the hidden node's edges, and each
successor is re-attributed to the predecessors, so anything that was
reachable through a hidden feature stays reachable from the same real
features.

Removal is one pass per hidden node, in sorted key order, and each removal
sees the graph as left by the previous ones. A chain ``a -> _x -> _y -> b``
is handled because removing ``_x`` makes ``a`` point at ``_y`` before ``_y``
is removed (or, in the other order, removing ``_y`` makes ``_x`` point at
``b`` first). There is no fixpoint iteration beyond that.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from featgraph.core.features.models import MAX_INHERITED_PRODUCTS, Feature

logger = logging.getLogger(__name__)

KeepHidden = Optional[Callable[[str], bool]]


def is_hidden(feature: Feature, keep_hidden: KeepHidden = None) -> bool:
    """True if the feature should be inlined away.

    Only explicit features are candidates: an implicit feature stands for a
    real dependency, whatever its name.
    """
    if not feature.explicit or not feature.is_hidden_name:
        return False
    return not (keep_hidden is not None and keep_hidden(feature.key))


def _inherit_products(successor: Feature, products: list[str]) -> None:
    for name in products[:MAX_INHERITED_PRODUCTS]:
        if name not in successor.required_by_products:
            successor.required_by_products.append(name)


def inline_feature(features: dict[str, Feature], key: str) -> set[str]:
    """Remove one feature, splicing its edges into its neighbours.

    Args:
        features: The live graph, modified in place.
        key: Key of the feature to remove.

    Returns:
        The features the removed node enabled directly, for the redirect
        table.
    """
    hidden = features.pop(key)
    redirect = hidden.enables_features - {key}

    for pred_key in hidden.enabled_by:
        pred = features.get(pred_key)
        if pred is None:
            continue
        pred.enables_features |= hidden.enables_features
        pred.enables_features -= {key, pred_key}
        for dep_key, action in hidden.enables_deps.items():
            if dep_key in pred.enables_deps:
                pred.enables_deps[dep_key].merge(action)
            else:
                pred.enables_deps[dep_key] = action.copy()
        pred.enables_deps.pop(key, None)

    plain_deps = {dep_key for dep_key, action in hidden.enables_deps.items() if action.is_plain}
    for succ_key in hidden.enables_features | plain_deps:
        succ = features.get(succ_key)
        if succ is None:
            continue
        succ.enabled_by |= hidden.enabled_by
        succ.enabled_by -= {key, succ_key}
        if succ_key in hidden.enables_features:
            _inherit_products(succ, hidden.required_by_products)

    # Conditional or dep-only references never made it into enabled_by
    for feature in features.values():
        feature.enables_features.discard(key)
        feature.enabled_by.discard(key)
        feature.enables_deps.pop(key, None)

    return redirect


def remove_hidden_features(
    features: dict[str, Feature],
    keep_hidden: KeepHidden = None,
) -> dict[str, set[str]]:
    """Inline every hidden feature.

    Args:
        features: The linked graph, modified in place.
        keep_hidden: Optional predicate; hidden names for which it returns
            True are kept as ordinary features.

    Returns:
        Redirect table from each removed key to the features it enabled.
    """
    hidden_keys = sorted(key for key, f in features.items() if is_hidden(f, keep_hidden))
    redirects: dict[str, set[str]] = {}
    for key in hidden_keys:
        redirects[key] = inline_feature(features, key)
        logger.debug("Inlined hidden feature %s into %s", key, sorted(redirects[key]))
    return redirects
