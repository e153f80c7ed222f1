"""``featgraph features <manifest>``: Print the resolved feature graph.

Loads the manifest, resolves features (implicit features for optional
dependencies, redundant sub-feature requests pruned, hidden features
inlined), and prints every feature with its edges.

Exit Codes:
    0: Graph printed.
    2: Manifest could not be loaded.
"""

from __future__ import annotations

import json
import sys

import click

from featgraph.cli.common import load_or_exit
from featgraph.core.features import Resolver


@click.command("features")
@click.argument("manifest_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.option(
    "--keep-hidden", "keep_hidden",
    multiple=True,
    metavar="NAME",
    help="Keep this hidden (underscore-prefixed) feature. Repeatable.",
)
@click.option(
    "--no-prune",
    is_flag=True,
    default=False,
    help="Keep dependency sub-features the declaration already requests.",
)
def features_command(
    manifest_path: str,
    output_format: str,
    keep_hidden: tuple[str, ...],
    no_prune: bool,
) -> None:
    """Resolve and print the feature graph of a Cargo manifest.

    MANIFEST_PATH may be a Cargo.toml, or the same structure as JSON/YAML.
    """
    manifest = load_or_exit(manifest_path, output_format)

    kept = set(keep_hidden)
    resolver = Resolver(
        keep_hidden=kept.__contains__ if kept else None,
        prune_redundant=not no_prune,
    )
    graph = resolver.parse(manifest)

    if output_format == "json":
        from featgraph.cli.output import features_to_dict
        click.echo(json.dumps(features_to_dict(graph), indent=2))
    else:
        from featgraph.cli.output import print_features
        print_features(graph, title=manifest.package_name() or "Features")
    sys.exit(0)
