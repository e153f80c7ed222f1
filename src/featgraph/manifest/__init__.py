"""Read-only Cargo manifest model and the loader that produces it.

All public names are re-exported here so that callers can write
``from featgraph.manifest import Manifest, load_manifest``.
"""

from featgraph.manifest.models import (
    Dependency,
    DepsSet,
    DetailedDependency,
    InheritedDependency,
    Manifest,
    Package,
    Product,
    SimpleDependency,
    Target,
    require_workspace_root,
)
from featgraph.manifest.loader import (
    dependency_from_value,
    load_manifest,
    manifest_from_mapping,
)

__all__ = [
    "Dependency",
    "DepsSet",
    "DetailedDependency",
    "InheritedDependency",
    "Manifest",
    "Package",
    "Product",
    "SimpleDependency",
    "Target",
    "require_workspace_root",
    "dependency_from_value",
    "load_manifest",
    "manifest_from_mapping",
]
