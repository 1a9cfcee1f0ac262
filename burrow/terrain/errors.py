"""Terrain generation error taxonomy.

``TransientStructural`` never leaves the generator: the retry loop in
``pipeline`` catches it and regenerates. ``RetryLimitExceeded`` is what callers
see when regeneration keeps failing. ``InvalidTileOperation`` flags a pass
sequencing bug and is not meant to be caught.
"""
from __future__ import annotations


class GenerationFailure(Exception):
    """Base class for failures surfaced by ``generate``."""


class TransientStructural(GenerationFailure):
    """The current attempt produced an unusable level; regenerate."""

    def __init__(self, reason: str, **details):
        super().__init__(reason)
        self.reason = reason
        self.details = details


class RetryLimitExceeded(GenerationFailure):
    def __init__(self, attempts: int, last_reason: str | None = None):
        msg = f"terrain generation failed after {attempts} attempts"
        if last_reason:
            msg += f" (last rejection: {last_reason})"
        super().__init__(msg)
        self.attempts = attempts
        self.last_reason = last_reason


class InvalidTileOperation(RuntimeError):
    """A family-specific tile mapping was asked for on the wrong tile."""


class PlacementFailure(Exception):
    """No valid clearing was found for a structure; the structure is skipped."""


__all__ = [
    "GenerationFailure",
    "TransientStructural",
    "RetryLimitExceeded",
    "InvalidTileOperation",
    "PlacementFailure",
]
