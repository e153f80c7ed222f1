"""``featgraph closure <manifest> <feature>``: Show what a feature turns on.

Computes the transitive closure of one feature over the resolved graph:
every feature it reaches and every dependency it unconditionally enables,
with the feature that introduced each dependency action.

Exit Codes:
    0: Closure printed.
    1: The feature does not exist (and is not an inlined hidden feature).
    2: Manifest could not be loaded.
"""

from __future__ import annotations

import json
import sys

import click

from featgraph.cli.common import load_or_exit
from featgraph.core.features import Resolver


@click.command("closure")
@click.argument("manifest_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("feature")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def closure_command(manifest_path: str, feature: str, output_format: str) -> None:
    """Print the transitive closure of FEATURE.

    Hidden features that were inlined are followed to the features they
    used to enable.
    """
    manifest = load_or_exit(manifest_path, output_format)
    graph = Resolver().parse(manifest)

    if feature not in graph and feature not in graph.hidden_features:
        message = f"Feature not found: {feature}"
        if output_format == "json":
            click.echo(json.dumps({"error": message}))
        else:
            click.echo(f"Error: {message}")
        sys.exit(1)

    closure = graph.closure(feature)
    if output_format == "json":
        from featgraph.cli.output import closure_to_dict
        click.echo(json.dumps(closure_to_dict(feature, closure), indent=2))
    else:
        from featgraph.cli.output import print_closure
        print_closure(feature, closure)
    sys.exit(0)
