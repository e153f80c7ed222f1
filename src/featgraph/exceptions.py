"""featgraph exception hierarchy.

All public exceptions inherit from FeatgraphError, giving callers a single
base class to catch when they want to handle any featgraph-specific failure
without swallowing unrelated errors.

The feature resolver itself never raises: every failure mode below belongs to
the layers that produce a manifest for it.
"""


class FeatgraphError(Exception):
    """Base exception for all featgraph errors."""


class ManifestError(FeatgraphError):
    """Raised when a manifest cannot be loaded.

    Covers unreadable files, malformed TOML/JSON/YAML, unsupported file
    extensions, and documents whose shape is not a Cargo manifest.
    """


class InheritedValueError(FeatgraphError):
    """Raised when a value is read before workspace inheritance populated it.

    Covers ``{ workspace = true }`` dependencies and package fields that
    still carry the inherited placeholder.
    """


class WorkspaceError(FeatgraphError):
    """Raised when a manifest expected to be a workspace root is not one."""
