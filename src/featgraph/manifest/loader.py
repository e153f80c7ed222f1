"""Build :class:`Manifest` objects from Cargo-shaped mappings and files.

The resolver works on already-deserialized data. This module is the thin
adapter in front of it: it reads a manifest file (TOML, JSON, or YAML) into a
plain mapping and converts that mapping into the read-only model types.

Keys follow Cargo's kebab-case spelling (``build-dependencies``,
``default-features``, ``required-features``). The legacy ``[project]`` table
is accepted as an alias of ``[package]``, and a manifest that omits both but
carries top-level ``name``/``version`` keys is read as a bare package.
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any

import yaml

from featgraph.exceptions import ManifestError
from featgraph.manifest.models import (
    Dependency,
    DetailedDependency,
    InheritedDependency,
    Manifest,
    Package,
    Product,
    SimpleDependency,
    Target,
)

logger = logging.getLogger(__name__)

_PRODUCT_SECTIONS = ("bin", "example", "test", "bench")


# ---------------------------------------------------------------------------
# Mapping -> model conversion
# ---------------------------------------------------------------------------


def _str_list(value: Any, where: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ManifestError(f"{where} must be a list of strings")
    return list(value)


def _opt_bool(table: dict[str, Any], keys: tuple[str, ...], default: bool, where: str) -> bool:
    for key in keys:
        if key in table:
            value = table[key]
            if not isinstance(value, bool):
                raise ManifestError(f"{where} {key} must be true or false")
            return value
    return default


def _opt_str(table: dict[str, Any], key: str) -> str | None:
    value = table.get(key)
    return value if isinstance(value, str) else None


def dependency_from_value(key: str, value: Any) -> Dependency:
    """Convert one dependency declaration into its model variant.

    Args:
        key: Manifest key of the dependency (used in error messages).
        value: A version string or a table of settings.

    Returns:
        A ``SimpleDependency``, ``InheritedDependency`` or
        ``DetailedDependency``.

    Raises:
        ManifestError: If the value is neither a string nor a table, or a
            flag such as ``optional`` is not a boolean.
    """
    if isinstance(value, str):
        return SimpleDependency(value)
    if not isinstance(value, dict):
        raise ManifestError(f"dependency {key!r} must be a string or a table")

    features = tuple(_str_list(value.get("features"), f"dependency {key!r} features"))
    optional = _opt_bool(value, ("optional",), False, f"dependency {key!r}")

    if value.get("workspace") is True:
        return InheritedDependency(features=features, is_optional=optional)

    known = {
        "version", "optional", "default-features", "default_features",
        "features", "package", "path", "registry", "registry-index",
        "git", "branch", "tag", "rev", "workspace",
    }
    unknown = sorted(set(value) - known)
    if unknown:
        logger.warning("Ignoring unknown keys on dependency %s: %s", key, ", ".join(unknown))

    return DetailedDependency(
        version=_opt_str(value, "version"),
        is_optional=optional,
        uses_default_features=_opt_bool(
            value, ("default-features", "default_features"), True, f"dependency {key!r}"
        ),
        features=features,
        package_name=_opt_str(value, "package"),
        path=_opt_str(value, "path"),
        registry=_opt_str(value, "registry"),
        registry_index=_opt_str(value, "registry-index"),
        git=_opt_str(value, "git"),
        branch=_opt_str(value, "branch"),
        tag=_opt_str(value, "tag"),
        rev=_opt_str(value, "rev"),
    )


def _deps_set(table: Any, where: str) -> dict[str, Dependency]:
    if table is None:
        return {}
    if not isinstance(table, dict):
        raise ManifestError(f"[{where}] must be a table")
    return {key: dependency_from_value(key, value) for key, value in table.items()}


def _product(table: Any, where: str) -> Product:
    if not isinstance(table, dict):
        raise ManifestError(f"[{where}] entries must be tables")
    return Product(
        name=_opt_str(table, "name"),
        path=_opt_str(table, "path"),
        required_features=_str_list(
            table.get("required-features", table.get("required_features")),
            f"[{where}] required-features",
        ),
        proc_macro=_opt_bool(table, ("proc-macro", "proc_macro"), False, f"[{where}]"),
    )


def _package(data: dict[str, Any]) -> Package | None:
    table = data.get("package", data.get("project"))
    if table is None and isinstance(data.get("name"), str):
        table = data
    if table is None:
        return None
    if not isinstance(table, dict) or not isinstance(table.get("name"), str):
        raise ManifestError("[package] must be a table with a string name")
    version = table.get("version", "0.0.0")
    # { workspace = true } leaves the version unknown until inheritance runs
    return Package(name=table["name"], version=version if isinstance(version, str) else None)


def _features(table: Any) -> dict[str, list[str]]:
    if table is None:
        return {}
    if not isinstance(table, dict):
        raise ManifestError("[features] must be a table")
    return {key: _str_list(actions, f"feature {key!r}") for key, actions in table.items()}


def manifest_from_mapping(data: dict[str, Any]) -> Manifest:
    """Convert a deserialized ``Cargo.toml`` mapping into a :class:`Manifest`.

    Args:
        data: The document as produced by a TOML/JSON/YAML parser.

    Returns:
        The populated manifest.

    Raises:
        ManifestError: If a section has the wrong shape.
    """
    if not isinstance(data, dict):
        raise ManifestError("manifest must be a table at the top level")

    targets_table = data.get("target") or {}
    if not isinstance(targets_table, dict):
        raise ManifestError("[target] must be a table")
    target = {
        cfg: Target(
            dependencies=_deps_set(t.get("dependencies"), f"target.{cfg}.dependencies"),
            build_dependencies=_deps_set(
                t.get("build-dependencies"), f"target.{cfg}.build-dependencies"
            ),
            dev_dependencies=_deps_set(
                t.get("dev-dependencies"), f"target.{cfg}.dev-dependencies"
            ),
        )
        for cfg, t in targets_table.items()
        if isinstance(t, dict)
    }

    products: dict[str, list[Product]] = {}
    for section in _PRODUCT_SECTIONS:
        entries = data.get(section) or []
        if not isinstance(entries, list):
            raise ManifestError(f"[[{section}]] must be an array of tables")
        products[section] = [_product(entry, section) for entry in entries]

    lib = data.get("lib")
    workspace = data.get("workspace")
    return Manifest(
        package=_package(data),
        workspace=workspace if isinstance(workspace, dict) else None,
        features=_features(data.get("features")),
        dependencies=_deps_set(data.get("dependencies"), "dependencies"),
        build_dependencies=_deps_set(data.get("build-dependencies"), "build-dependencies"),
        dev_dependencies=_deps_set(data.get("dev-dependencies"), "dev-dependencies"),
        target=target,
        lib=_product(lib, "lib") if lib is not None else None,
        **products,
    )


# ---------------------------------------------------------------------------
# File loading
# ---------------------------------------------------------------------------


def _read_document(path: Path) -> Any:
    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            with path.open("rb") as fh:
                return tomllib.load(fh)
        text = path.read_text(encoding="utf-8")
        if suffix == ".json":
            return json.loads(text)
        if suffix in (".yaml", ".yml"):
            return yaml.safe_load(text)
    except OSError as exc:
        raise ManifestError(f"cannot read {path}: {exc}") from exc
    except (
        UnicodeDecodeError, tomllib.TOMLDecodeError, json.JSONDecodeError, yaml.YAMLError
    ) as exc:
        raise ManifestError(f"cannot parse {path}: {exc}") from exc
    raise ManifestError(f"unsupported manifest format: {path.name}")


def load_manifest(path: str | Path) -> Manifest:
    """Read and convert a manifest file.

    ``.toml`` files are read with ``tomllib``; ``.json`` and ``.yaml``/``.yml``
    files hold the same structure in those syntaxes.

    Args:
        path: Path to the manifest file.

    Returns:
        The populated manifest.

    Raises:
        ManifestError: If the file cannot be read, parsed or converted.
    """
    path = Path(path)
    return manifest_from_mapping(_read_document(path))
