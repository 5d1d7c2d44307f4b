"""Exception types raised by the ordering engine and its adapters.

Every error carries the structured data a caller needs to report it
(the offending stem, or the cyclic path) so nothing has to be parsed
back out of the message.
"""


class NamingError(ValueError):
    """Raised when a stem does not follow the BEM naming grammar."""

    def __init__(self, stem: str, reason: str | None = None):
        self.stem = stem
        self.reason = reason
        message = f"Invalid BEM naming used: {stem!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class GraphError(Exception):
    """Base class for dependency graph construction failures."""

    pass


class GraphNamingError(GraphError):
    """Raised when a graph node fails identifier validation."""

    def __init__(self, stem: str):
        self.stem = stem
        super().__init__(f"Cannot build dependency graph, invalid naming: {stem!r}")


class OrderError(Exception):
    """Base class for ordering failures."""

    pass


class CircularDependencyError(OrderError):
    """Raised when a dependency cycle blocks ordering.

    ``path`` lists the stems on the cycle, with the first stem repeated
    at the end (``["a", "b", "a"]``).
    """

    def __init__(self, path: list[str]):
        self.path = list(path)
        super().__init__(
            "Circular dependency detected: " + " -> ".join(self.path)
        )


class OrderNamingError(OrderError):
    """Raised when a present stem fails identifier validation."""

    def __init__(self, stem: str):
        self.stem = stem
        super().__init__(f"Cannot order artifacts, invalid naming: {stem!r}")


class DeclarationFileError(Exception):
    """Raised when a declaration file cannot be read or decoded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load declarations from {path}: {reason}")
