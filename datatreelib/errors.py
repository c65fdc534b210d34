"""Exception hierarchy for DataTreeLib.

Structural failures (binding a source, choosing an adapter, using a provider
with nothing bound) propagate to the caller. ReadError is different: it is
raised inside adapters when one node's data cannot be resolved and is caught
again at the ``get_node_data`` boundary, so a single bad dataset never stops
browsing the rest of the tree.
"""

from typing import Optional


class DataTreeError(Exception):
    """Base class for all DataTreeLib errors."""


class OpenError(DataTreeError):
    """Raised when an adapter cannot bind to a source."""

    def __init__(self, locator, reason: str):
        self.locator = str(locator)
        self.reason = reason
        super().__init__(f"Cannot open {self.locator!r}: {reason}")


class UnsupportedTypeError(DataTreeError, ValueError):
    """Raised when the factory has no adapter for a locator."""

    def __init__(self, locator, extension: Optional[str]):
        self.locator = str(locator)
        self.extension = extension or "(none)"
        super().__init__(f"Unsupported file type: {self.extension}")


class ReadError(DataTreeError):
    """Raised when the data behind a single node cannot be resolved."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path!r}: {reason}")


class NoAdapterError(DataTreeError):
    """Raised when a TreeNodeProvider is queried before an adapter is bound."""

    def __init__(self, message: str = "No adapter set"):
        super().__init__(message)
