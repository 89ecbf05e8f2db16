"""Exceptions raised by the ghostwriter pipeline."""

from typing import Tuple


class GhostwriterError(Exception):
    """Base class for all fatal ingestion and generation errors."""


class CapacityExceeded(GhostwriterError):
    """The token dictionary has no free slot left for a new token."""

    def __init__(self, token: str, capacity: int):
        super().__init__(f"Dictionary full ({capacity} tokens), cannot add {token!r}")
        self.token = token
        self.capacity = capacity


class WordTooLong(GhostwriterError):
    """A word in the input exceeds the maximum word length."""

    def __init__(self, max_len: int):
        super().__init__(f"Maximum word length ({max_len}) exceeded")
        self.max_len = max_len


class ContextNotFound(GhostwriterError):
    """Generation reached a token pair that was never observed."""

    def __init__(self, context: Tuple[int, int]):
        super().__init__(
            f"Token pair (#{context[0]:05d}, #{context[1]:05d}) not found in index"
        )
        self.context = context


class SamplingError(GhostwriterError):
    """The weighted walk ran past the end of a successor list."""


class SourceUnavailable(GhostwriterError):
    """An input file could not be opened or read."""

    def __init__(self, path, reason: str):
        super().__init__(f"Can't open input file '{path}': {reason}")
        self.path = path
