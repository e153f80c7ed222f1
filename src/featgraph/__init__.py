"""featgraph: Feature-dependency graph resolution for Cargo manifests."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
