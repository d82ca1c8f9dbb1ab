"""Shared navigation state: a stack plus a modal slot, observed by a renderer.

Both the imperative controller (opaque content wrapped in ``Route``) and the
declarative coordinators (closed route values) build on ``NavigationState``.
They differ only in the element type held by the stack and the modal slot.
"""
from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from .errors import ThreadAffinityError
from .modal import ModalRoute, ModalSlot
from .stack import NavigationStack

logger = logging.getLogger(__name__)

E = TypeVar("E")


@dataclass(frozen=True)
class NavigationSnapshot(Generic[E]):
    """Immutable view of the navigation state handed to listeners."""

    path: tuple[E, ...]
    modal: ModalRoute[E] | None

    @property
    def depth(self) -> int:
        return len(self.path)

    @property
    def top(self) -> E | None:
        return self.path[-1] if self.path else None

    @property
    def sheet(self) -> E | None:
        return self.modal.route if self.modal is not None and self.modal.is_sheet else None

    @property
    def full_screen(self) -> E | None:
        return self.modal.route if self.modal is not None and self.modal.is_full_screen else None


Listener = Callable[[NavigationSnapshot], Any]


class NavigationState(Generic[E]):
    """Stack + modal slot behind one observable handle.

    Every mutation goes through ``_mutate`` so that:
    - it runs on the thread that created the state,
    - listeners are told about it before the next mutation is applied,
    - a mutation requested while listeners are running is queued and applied
      afterwards, in call order.
    """

    def __init__(self, *, strict_threading: bool = True) -> None:
        self._stack: NavigationStack[E] = NavigationStack()
        self._modal: ModalSlot[E] = ModalSlot()
        self._listeners: list[Listener] = []
        self._pending: deque[tuple[str, Callable[[], Any]]] = deque()
        self._notifying = False
        self._strict_threading = strict_threading
        self._owner_thread = threading.get_ident()

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> NavigationSnapshot[E]:
        return NavigationSnapshot(self._stack.snapshot(), self._modal.value)

    # ------------------------------------------------------------------
    # Element-level operations shared by both designs
    # ------------------------------------------------------------------

    def push_element(self, element: E) -> None:
        self._mutate("push", lambda: self._stack.push(element))

    def pop_element(self) -> E | None:
        """Pop the top element. Returns None when empty or when deferred."""
        return self._mutate("pop", self._stack.pop)

    def pop_to_root(self) -> None:
        """Clear the stack. A no-op on an empty stack, but still observable."""
        self._mutate("pop_to_root", self._stack.pop_to_root)

    def present_element(self, element: E) -> None:
        self._mutate("present", lambda: self._modal.present(element))

    def sheet_element(self, element: E) -> None:
        self._mutate("sheet", lambda: self._modal.sheet(element))

    def dismiss(self) -> None:
        """Clear the modal slot. A no-op when nothing is presented."""
        self._mutate("dismiss", self._modal.dismiss)

    def current_modal(self) -> E | None:
        return self._modal.current()

    @property
    def strict_threading(self) -> bool:
        return self._strict_threading

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def sheet_route(self) -> E | None:
        return self._modal.sheet_route

    @property
    def full_screen_route(self) -> E | None:
        return self._modal.full_screen_route

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_thread(self) -> None:
        if self._strict_threading and threading.get_ident() != self._owner_thread:
            raise ThreadAffinityError(
                f"{type(self).__name__} must be mutated on the thread that created it"
            )

    def _mutate(self, label: str, fn: Callable[[], Any]) -> Any:
        self._check_thread()
        if self._notifying:
            logger.debug("%s: deferring %s until listeners finish", type(self).__name__, label)
            self._pending.append((label, fn))
            return None

        result = fn()
        logger.debug("%s: %s -> depth=%d modal=%r", type(self).__name__, label, len(self._stack), self._modal.value)
        self._notify()

        while self._pending:
            pending_label, pending_fn = self._pending.popleft()
            pending_fn()
            logger.debug("%s: %s (deferred) -> depth=%d", type(self).__name__, pending_label, len(self._stack))
            self._notify()
        return result

    def _notify(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        self._notifying = True
        try:
            for listener in list(self._listeners):
                try:
                    listener(snap)
                except Exception:
                    logger.exception("Navigation listener %r failed", listener)
        finally:
            self._notifying = False
