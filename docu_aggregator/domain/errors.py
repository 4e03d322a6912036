"""Errors raised while reading raw documentation and aggregating builds."""


class ResourceNotFoundError(Exception):
    """A raw documentation artifact does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Resource not found: {path}")
        self.path = path


class MarshalError(Exception):
    """Reading or writing a documentation file failed."""
    pass


class AggregationError(Exception):
    """Aggregation of a build failed and was aborted."""
    pass
