"""Imperative navigation controller over opaque screen content."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, TypeVar

from .modal import ModalRoute
from .route import Route, make_route
from .stack import PopOutcome, PopResult
from .state import NavigationState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NavigationController(NavigationState[Route]):
    """Push/pop/present/dismiss API over a stack and a modal slot of ``Route``.

    This is the object shared between a flow's coordinator and the rendering
    layer. Content handed to it is wrapped in a fresh ``Route`` and never
    looked at again, except for the ``isinstance`` check of a narrowed pop.
    """

    def push(self, content: Any, type_tag: str | None = None) -> None:
        """Push content onto the navigation stack."""
        self.push_element(make_route(content, type_tag))

    def pop(self) -> None:
        """Remove the most recently pushed screen, if any."""
        self.pop_element()

    def pop_result(self, cls: type[T]) -> PopResult:
        """Pop the top screen only if its content is a ``cls``.

        Returns:
            ``PopResult`` whose ``value`` is the unwrapped content on success.
            A mismatching top screen is left on the stack.
        """
        result = self._mutate(
            "pop_result",
            lambda: self._stack.pop_where(lambda route: isinstance(route.content, cls)),
        )
        if result is None:
            return PopResult(PopOutcome.DEFERRED)
        if result.ok:
            return PopResult(PopOutcome.VALUE, result.value.content)
        return result

    def pop_as(self, cls: type[T]) -> T | None:
        """Pop and return the top screen's content narrowed to ``cls``.

        None covers both "stack empty" and "top is another type"; use
        ``pop_result`` to tell them apart. On a mismatch nothing is removed.
        """
        result = self.pop_result(cls)
        return result.value if result.ok else None

    def present(self, content: Any, type_tag: str | None = None) -> None:
        """Present content full screen, replacing any sheet or cover."""
        self.present_element(make_route(content, type_tag))

    def sheet(self, content: Any, type_tag: str | None = None) -> None:
        """Present content as a sheet, replacing any sheet or cover."""
        self.sheet_element(make_route(content, type_tag))

    @property
    def path(self) -> tuple[Route, ...]:
        return self._stack.snapshot()

    @property
    def modal(self) -> Route | None:
        """Route of the active modal, whichever style it uses."""
        return self._modal.current()

    @property
    def modal_route(self) -> ModalRoute[Route] | None:
        return self._modal.value

    def top_content(self) -> Any:
        top = self._stack.peek()
        return top.content if top is not None else None

    def __repr__(self) -> str:
        return f"NavigationController(depth={len(self._stack)}, modal={self._modal.value!r})"


@dataclass(frozen=True)
class NavigationScope:
    """Nested navigation: a controller together with its root content.

    Presenting a ``NavigationScope`` in a modal gives the presented flow its
    own stack, independent of the presenter's.
    """

    controller: NavigationController
    root: Any
