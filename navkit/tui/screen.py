"""Screen content understood by the terminal router."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class Action:
    """A menu entry offered by a screen."""

    label: str
    value: str
    handler: Callable[[], Any]


class Screen:
    """Base for content pushed or presented through navkit in the TUI.

    The engine treats screens as opaque; only the router reads ``title``,
    ``body()`` and ``actions()``.
    """

    title: str = ""

    def body(self) -> Any:
        return ""

    def actions(self) -> list[Action]:
        return []

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.title!r})"
