"""Parent and child coordinators.

A child coordinator runs a short flow inside its parent's modal slot. It has
its own controller and reports completion through a single callback handed
over at construction; it never touches the parent's state directly.
"""
from __future__ import annotations

import enum
import logging
import weakref
from typing import Any, Callable, Iterable

from .clock import Clock
from .controller import NavigationController, NavigationScope
from .errors import CoordinatorStateError
from .sequence import LifetimeScope, ScriptedSequence, Step

logger = logging.getLogger(__name__)


class CoordinatorState(enum.Enum):
    IDLE = "idle"
    STARTED = "started"
    TERMINATED = "terminated"


def one_shot(callback: Callable[[], Any]) -> Callable[[], None]:
    """Wrap ``callback`` so that only its first call goes through."""
    fired = False

    def call() -> None:
        nonlocal fired
        if fired:
            logger.debug("One-shot callback already fired; ignoring")
            return
        fired = True
        callback()

    return call


def weak_callback(method: Callable[[], Any]) -> Callable[[], None]:
    """Wrap a bound method without keeping its object alive.

    Once the object is gone, calling the wrapper does nothing.
    """
    ref = weakref.WeakMethod(method)
    name = method.__qualname__

    def call() -> None:
        target = ref()
        if target is None:
            logger.debug("Completion target %s is gone; ignoring", name)
            return
        target()

    return call


class ChildCoordinator:
    """Coordinator presented as a sheet inside a host controller.

    Subclasses provide ``root_content()``. Calling ``finish()`` fires the stored
    completion callback exactly once.
    """

    def __init__(self, on_stop: Callable[[], Any], *, strict_threading: bool = True):
        self.navigation_controller = NavigationController(strict_threading=strict_threading)
        self._on_stop: Callable[[], Any] | None = one_shot(on_stop)
        self.state = CoordinatorState.IDLE

    def root_content(self) -> Any:
        raise NotImplementedError

    def start(self, host: NavigationController) -> None:
        """Present this flow's own navigation scope as a sheet on ``host``.

        Raises:
            CoordinatorStateError: if the child was already started
        """
        if self.state is not CoordinatorState.IDLE:
            raise CoordinatorStateError(
                f"{type(self).__name__} cannot start from state {self.state.value}"
            )
        host.sheet(NavigationScope(self.navigation_controller, self.root_content()))
        self.state = CoordinatorState.STARTED
        logger.info("%s started", type(self).__name__)

    def finish(self) -> None:
        """Terminal event: hand control back to the parent."""
        if self.state is CoordinatorState.IDLE:
            raise CoordinatorStateError(f"{type(self).__name__} finished before it was started")
        if self.state is CoordinatorState.TERMINATED:
            logger.warning("%s already finished; completion not repeated", type(self).__name__)
            return
        callback, self._on_stop = self._on_stop, None
        self.state = CoordinatorState.TERMINATED
        logger.info("%s finished", type(self).__name__)
        if callback is not None:
            callback()


class Coordinator:
    """Owner of a navigation flow: a controller, a clock and a lifetime scope.

    Scripts started through ``run_script`` stop as soon as the coordinator is
    closed or garbage collected.
    """

    def __init__(
        self,
        clock: Clock,
        navigation_controller: NavigationController | None = None,
        scope: LifetimeScope | None = None,
    ):
        self.navigation_controller = navigation_controller or NavigationController()
        self.clock = clock
        name = type(self).__name__
        self.scope = (scope.child(name) if scope is not None else LifetimeScope(name)).bind_owner(self)

    def run_script(self, steps: Iterable[Step], name: str = "script") -> ScriptedSequence:
        return ScriptedSequence(steps, self.clock, self.scope, name=name).start()

    def close(self) -> None:
        self.scope.close()

    @property
    def closed(self) -> bool:
        return self.scope.closed
