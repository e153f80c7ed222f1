"""Parser for the ``[features]`` action micro-syntax.

Each feature lists actions, one string per item::

    "name"                  enable feature ``name``
    "dep:name"              enable dependency ``name`` without its implicit feature
    "name/sub"              enable dependency ``name`` and its feature ``sub``
    "name?/sub"             enable ``sub`` on ``name`` only if ``name`` is on anyway
    "dep:name?/sub"         both markers

Actions that carry a marker or a ``/`` become :class:`DepAction` entries keyed
by the dependency; bare names become feature-to-feature edges.
"""

from __future__ import annotations

import logging
from itertools import islice
from typing import Iterable, Mapping, Sequence

from featgraph.core.features.models import (
    DEFAULT_FEATURE,
    MAX_ITEMS,
    DepAction,
    Feature,
)

logger = logging.getLogger(__name__)

_DEP_PREFIX = "dep:"
_CONDITIONAL_SUFFIX = "?"


def parse_action(action: str) -> tuple[str, DepAction | None]:
    """Split one action string into its target and dependency action.

    Returns:
        ``(target, None)`` for a plain feature edge, otherwise
        ``(target, DepAction)``. Malformed input never fails: ``"/x"`` has
        the empty string as its target.
    """
    target, slash, sub_feature = action.partition("/")

    is_dep_only = target.startswith(_DEP_PREFIX)
    if is_dep_only:
        target = target[len(_DEP_PREFIX):]
    is_conditional = target.endswith(_CONDITIONAL_SUFFIX)
    if is_conditional:
        target = target[: -len(_CONDITIONAL_SUFFIX)]

    if not (is_dep_only or is_conditional or slash):
        return target, None
    return target, DepAction(
        is_conditional=is_conditional,
        is_dep_only=is_dep_only,
        dep_features={sub_feature} if slash else set(),
    )


def parse_feature(key: str, actions: Sequence[str]) -> Feature:
    """Build an explicit :class:`Feature` from its list of actions.

    Repeated actions on the same dependency are merged with
    :meth:`DepAction.merge`. At most ``MAX_ITEMS`` actions are read.
    """
    if len(actions) > MAX_ITEMS:
        logger.debug("Feature %s: truncating %d actions to %d", key, len(actions), MAX_ITEMS)

    feature = Feature(key=key, explicit=True)
    for action in islice(actions, MAX_ITEMS):
        target, dep_action = parse_action(action)
        if dep_action is None:
            feature.enables_features.add(target)
        elif target in feature.enables_deps:
            feature.enables_deps[target].merge(dep_action)
        else:
            feature.enables_deps[target] = dep_action
    return feature


def parse_features(declared: Mapping[str, Sequence[str]]) -> dict[str, Feature]:
    """Parse a whole ``[features]`` table.

    Reads at most ``MAX_ITEMS`` features in declaration order, then makes
    sure a ``"default"`` feature exists.
    """
    if len(declared) > MAX_ITEMS:
        logger.debug("Truncating %d features to %d", len(declared), MAX_ITEMS)

    items: Iterable[tuple[str, Sequence[str]]] = islice(declared.items(), MAX_ITEMS)
    features = {key: parse_feature(key, actions) for key, actions in items}
    if DEFAULT_FEATURE not in features:
        features[DEFAULT_FEATURE] = Feature(key=DEFAULT_FEATURE, explicit=True)
    return features
