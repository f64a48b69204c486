"""Exception types raised by the lineage core."""


class LineageError(Exception):
    """Base class for all lineage core failures."""


class InvalidView(LineageError, ValueError):
    """Raised when a caller asks for a view that is not configured."""

    def __init__(self, view, known=None):
        self.view = view
        self.known = sorted(known or [])
        message = f"Unknown lineage view: {view!r}"
        if self.known:
            message += f". Known views: {self.known}"
        super().__init__(message)


class InvalidScope(LineageError, ValueError):
    """Raised when a caller asks for a scope outside the supported set."""

    def __init__(self, scope, known=None):
        self.scope = scope
        self.known = list(known or [])
        message = f"Unknown lineage scope: {scope!r}"
        if self.known:
            message += f". Supported scopes: {self.known}"
        super().__init__(message)


class StoreUnavailable(LineageError, RuntimeError):
    """The graph store could not be reached or failed while serving a read."""


class ReservedNodeId(LineageError, ValueError):
    """A real vertex tried to use one of the condensed node ids."""


class DataValidationError(LineageError, ValueError):
    """Fixture data handed to an in-memory store is malformed."""
