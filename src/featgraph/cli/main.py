"""featgraph CLI: Inspect the feature graph of Cargo manifests.

Entry point for the ``featgraph`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    features: Print the resolved feature graph of a manifest.
    closure:  Print everything one feature transitively enables.

Usage::

    featgraph features ./Cargo.toml
    featgraph features ./Cargo.toml --format json
    featgraph features ./Cargo.toml --keep-hidden __unstable
    featgraph closure ./Cargo.toml default
"""

from __future__ import annotations

import logging

import click

from featgraph import __version__
from featgraph.cli.closure_cmd import closure_command
from featgraph.cli.features_cmd import features_command


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log resolution steps.")
def cli(verbose: bool) -> None:
    """featgraph: Feature-dependency graphs for Cargo manifests.

    Resolve which features enable which features and dependencies,
    including implicit features of optional dependencies, with hidden
    helper features inlined away.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


# Register all subcommands
cli.add_command(features_command)
cli.add_command(closure_command)
