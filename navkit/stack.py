"""Ordered navigation stack of pushed screens."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, TypeVar

E = TypeVar("E")


class PopOutcome(enum.Enum):
    EMPTY = "empty"
    MISMATCH = "mismatch"
    VALUE = "value"
    # requested from inside a listener; applied after the current round
    DEFERRED = "deferred"


@dataclass(frozen=True)
class PopResult:
    """Result of a conditional pop.

    Keeps "nothing to pop" apart from "top did not match", which a plain
    ``None`` return cannot do.
    """

    outcome: PopOutcome
    value: Any = None

    @property
    def ok(self) -> bool:
        return self.outcome is PopOutcome.VALUE


class NavigationStack(Generic[E]):
    """Stack of pushed elements. The root screen is implicit and never stored.

    The only mutations are append, remove-last and clear.
    """

    def __init__(self) -> None:
        self._items: list[E] = []

    def push(self, element: E) -> None:
        """Append an element on top of the stack."""
        self._items.append(element)

    def pop(self) -> E | None:
        """Remove and return the top element, or None if the stack is empty."""
        if self._items:
            return self._items.pop()
        return None

    def pop_where(self, predicate: Callable[[E], bool]) -> PopResult:
        """Pop the top element only if ``predicate`` accepts it.

        A rejected element stays on the stack.
        """
        if not self._items:
            return PopResult(PopOutcome.EMPTY)
        if not predicate(self._items[-1]):
            return PopResult(PopOutcome.MISMATCH)
        return PopResult(PopOutcome.VALUE, self._items.pop())

    def pop_to_root(self) -> None:
        """Remove every pushed element."""
        self._items.clear()

    def replace(self, elements: list[E]) -> None:
        """Swap the whole contents in one step (used by bindable paths)."""
        self._items = list(elements)

    def peek(self) -> E | None:
        return self._items[-1] if self._items else None

    def snapshot(self) -> tuple[E, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[E]:
        return iter(tuple(self._items))

    def __repr__(self) -> str:
        return f"NavigationStack({self._items!r})"
