"""Rich output formatting helpers for the featgraph CLI.

Provides the feature table, the dependency table, and closure summaries,
plus the plain-dict conversions used for ``--format json``.

Color Mapping:
    explicit feature = bold, implicit feature = dim cyan,
    conditional action = yellow, dep-only action = magenta
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from featgraph.core.features import DepAction, FeatureClosure, Features
from featgraph.exceptions import InheritedValueError

console = Console()


# ---------------------------------------------------------------------------
# Plain-dict conversions
# ---------------------------------------------------------------------------


def action_label(dep_key: str, action: DepAction) -> str:
    """Render a dependency action back in manifest syntax, e.g. ``dep:x?/a,b``."""
    label = dep_key
    if action.is_dep_only:
        label = f"dep:{label}"
    if action.is_conditional:
        label = f"{label}?"
    if action.dep_features:
        label = f"{label}/{','.join(sorted(action.dep_features))}"
    return label


def action_to_dict(action: DepAction) -> dict[str, Any]:
    return {
        "is_conditional": action.is_conditional,
        "is_dep_only": action.is_dep_only,
        "dep_features": sorted(action.dep_features),
    }


def _dep_req(dep) -> str:
    try:
        return dep.req()
    except InheritedValueError:
        return "workspace"


def features_to_dict(graph: Features) -> dict[str, Any]:
    """Convert a resolved graph to a JSON-serializable dict with sorted keys."""
    features = {
        key: {
            "explicit": f.explicit,
            "enables_features": sorted(f.enables_features),
            "enables_deps": {
                dep_key: action_to_dict(action)
                for dep_key, action in sorted(f.enables_deps.items())
            },
            "enabled_by": sorted(f.enabled_by),
            "required_by_products": list(f.required_by_products),
        }
        for key, f in sorted(graph.features.items())
    }
    dependencies = {
        key: {
            "crate_name": dep.crate_name,
            "targets": [
                {
                    "kind": target_key.kind.value,
                    "target": target_key.target,
                    "req": _dep_req(decl),
                    "optional": decl.optional,
                }
                for target_key, decl in dep.targets.items()
            ],
        }
        for key, dep in sorted(graph.dependencies.items())
    }
    return {
        "features": features,
        "dependencies": dependencies,
        "hidden_features": {k: sorted(v) for k, v in sorted(graph.hidden_features.items())},
        "removed_hidden_features": graph.removed_hidden_features,
    }


def closure_to_dict(feature_key: str, closure: FeatureClosure) -> dict[str, Any]:
    return {
        "feature": feature_key,
        "features": sorted(closure.features),
        "dependencies": {
            dep_key: [
                {"via": via, **action_to_dict(action)} for via, action in sources
            ]
            for dep_key, sources in sorted(closure.dependencies.items())
        },
    }


# ---------------------------------------------------------------------------
# Rich rendering
# ---------------------------------------------------------------------------


def _action_text(dep_key: str, action: DepAction) -> Text:
    style = ""
    if action.is_dep_only:
        style = "magenta"
    if action.is_conditional:
        style = "yellow"
    return Text(action_label(dep_key, action), style=style)


def print_features(graph: Features, title: str = "Features") -> None:
    """Print the feature table and the referenced dependencies.

    Args:
        graph: Resolved feature graph.
        title: Table title, usually the package name.
    """
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Feature", style="bold")
    table.add_column("Enables features")
    table.add_column("Enables deps")
    table.add_column("Enabled by", style="dim")
    table.add_column("Required by", style="dim")

    for key in sorted(graph.features):
        f = graph.features[key]
        name = Text(key, style="bold" if f.explicit else "dim cyan")
        deps = Text(", ").join(
            _action_text(dep_key, action) for dep_key, action in sorted(f.enables_deps.items())
        )
        table.add_row(
            name,
            ", ".join(sorted(f.enables_features)),
            deps,
            ", ".join(sorted(f.enabled_by)),
            ", ".join(f.required_by_products),
        )
    console.print(table)

    if graph.dependencies:
        dep_table = Table(title="Dependencies", show_header=True, header_style="bold")
        dep_table.add_column("Key", style="bold")
        dep_table.add_column("Crate")
        dep_table.add_column("Declared in")
        dep_table.add_column("Optional", justify="center")
        for key in sorted(graph.dependencies):
            dep = graph.dependencies[key]
            where = ", ".join(
                f"{tk.kind.value}[{tk.target}]" if tk.target else tk.kind.value
                for tk in dep.targets
            )
            optional = Text("yes", style="cyan") if dep.is_optional() else Text("no", style="dim")
            dep_table.add_row(key, dep.crate_name, where, optional)
        console.print(dep_table)

    if graph.removed_hidden_features:
        hidden = ", ".join(sorted(graph.hidden_features))
        console.print(f"[dim]Inlined hidden features: {hidden}[/dim]")


def print_closure(feature_key: str, closure: FeatureClosure) -> None:
    """Print everything a feature transitively enables."""
    console.print(Panel(Text(feature_key, style="bold"), title="Feature Closure"))
    console.print("  Features: " + ", ".join(sorted(closure.features)))

    if not closure.dependencies:
        console.print("[dim]No dependencies enabled.[/dim]")
        return

    table = Table(title="Enabled Dependencies", show_header=True)
    table.add_column("Dependency", style="bold")
    table.add_column("Via")
    table.add_column("Sub-features")
    for dep_key in sorted(closure.dependencies):
        sources = closure.dependencies[dep_key]
        via = ", ".join(dict.fromkeys(source for source, _ in sources))
        table.add_row(dep_key, via, ", ".join(sorted(closure.dep_features(dep_key))))
    console.print(table)
