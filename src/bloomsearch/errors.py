class BloomSearchError(Exception):
    """Base class for errors raised by bloomsearch."""


class InvalidConfiguration(BloomSearchError, ValueError):
    """Filter sizing inputs are unusable (non-positive or non-integer)."""


class UninitializedQuery(BloomSearchError, RuntimeError):
    """A document filter was queried before its words were added."""
