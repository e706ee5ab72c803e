class RTreeError(Exception):
    """Base class for errors raised by the R-tree."""

    pass


class ConfigurationError(RTreeError, ValueError):
    """Indicates the tree was constructed with invalid settings (e.g., too few entries per node)."""

    pass


class NodeCapacityError(RTreeError):
    """Indicates a child was attached to a node that has no free slots left."""

    pass


class EmptyNodeError(RTreeError):
    """Indicates a child was requested from a node that has no children."""

    pass
