"""Exception types raised by navkit.

Ordinary navigation misuse (popping an empty stack, dismissing when nothing is
shown, a narrowed pop that does not match) is never an error. Everything here
signals a programming mistake in the caller and is meant to propagate.
"""
from __future__ import annotations


class NavKitError(Exception):
    """Base class for navkit errors."""


class CoordinatorStateError(NavKitError):
    """A child coordinator was driven out of order (e.g. started twice)."""


class SequenceStateError(NavKitError):
    """A scripted sequence was started when it was not idle."""


class IncompleteRouteMapError(NavKitError):
    """A declarative coordinator does not map every route case to content."""

    def __init__(self, coordinator: str, missing: list[str]):
        self.coordinator = coordinator
        self.missing = missing
        super().__init__(
            f"{coordinator} has no destination for: {', '.join(missing)}"
        )


class ThreadAffinityError(NavKitError):
    """Navigation state was mutated from a thread other than its UI thread."""
