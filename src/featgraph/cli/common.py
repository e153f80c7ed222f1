"""Shared helpers for featgraph CLI commands."""

from __future__ import annotations

import json
import sys

import click

from featgraph.exceptions import FeatgraphError
from featgraph.manifest import Manifest, load_manifest


def load_or_exit(path: str, output_format: str) -> Manifest:
    """Load a manifest, exiting with code 2 if it cannot be loaded.

    Args:
        path: Manifest file path from the command line.
        output_format: ``"text"`` or ``"json"``; selects the error shape.

    Returns:
        The loaded manifest.
    """
    try:
        return load_manifest(path)
    except FeatgraphError as exc:
        if output_format == "json":
            click.echo(json.dumps({"error": str(exc)}))
        else:
            click.echo(f"Error: {exc}")
        sys.exit(2)
