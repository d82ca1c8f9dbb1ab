"""The A–E sample flow: push, a child flow in a sheet, and a timed hand-back.

A pushes B. B starts a child coordinator whose screen C sits in a sheet.
Finishing C hands control back to the parent, which then dismisses the sheet,
shows D full screen for a while, dismisses it and pushes E.
"""
from __future__ import annotations

import logging
import weakref
from typing import Any, Callable

from ..child import ChildCoordinator, Coordinator, weak_callback
from ..clock import Clock
from ..controller import NavigationController
from ..sequence import LifetimeScope, ScriptedSequence, Step
from ..tui.screen import Action, Screen

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# SCREENS
# ═══════════════════════════════════════════════════════════════════════════════

class ScreenA(Screen):
    title = "A"

    def __init__(self, coordinator: FlowCoordinator):
        self.coordinator = coordinator

    def actions(self) -> list[Action]:
        return [Action("Navigate to B", "to_b", self.coordinator.navigate_to_b)]


class ScreenB(Screen):
    title = "B"

    def __init__(self, coordinator: FlowCoordinator):
        self.coordinator = coordinator

    def actions(self) -> list[Action]:
        return [
            Action("Navigate to C", "to_c", self.coordinator.navigate_to_c),
            Action("Pop to A", "pop", self.coordinator.pop),
        ]


class ScreenC(Screen):
    title = "C"

    def __init__(self, coordinator: FlowCCoordinator):
        self.coordinator = coordinator

    def body(self) -> str:
        return "Child flow presented as a sheet."

    def actions(self) -> list[Action]:
        return [Action("Dismiss C, then present D", "finish", self.coordinator.dismiss_c_then_present_d)]


class ScreenD(Screen):
    title = "D"

    def __init__(self, countdown: float = 2.0):
        self.countdown = countdown

    def body(self) -> str:
        return f"Dismissing view in: {self.countdown:g}s"


class ScreenE(Screen):
    title = "E"

    def __init__(self, coordinator: FlowCoordinator | None):
        self.coordinator = coordinator

    def actions(self) -> list[Action]:
        if self.coordinator is None:
            return []
        return [Action("Pop to root", "root", self.coordinator.navigate_to_root)]


# ═══════════════════════════════════════════════════════════════════════════════
# COORDINATORS
# ═══════════════════════════════════════════════════════════════════════════════

class FlowCCoordinator(ChildCoordinator):
    """Child flow hosting screen C."""

    def root_content(self) -> Any:
        return ScreenC(self)

    def dismiss_c_then_present_d(self) -> None:
        self.finish()


class FlowCoordinator(Coordinator):
    """Parent coordinator for A–E.

    ``first_delay`` is how long the parent waits after dismissing C before
    presenting D; ``second_delay`` is how long D stays up.
    """

    def __init__(
        self,
        clock: Clock,
        navigation_controller: NavigationController | None = None,
        scope: LifetimeScope | None = None,
        first_delay: float = 1.0,
        second_delay: float = 2.0,
    ):
        super().__init__(clock, navigation_controller, scope)
        self.first_delay = first_delay
        self.second_delay = second_delay
        self.post_dismissal: ScriptedSequence | None = None

    def root_content(self) -> Screen:
        return ScreenA(self)

    def navigate_to_b(self) -> None:
        self.navigation_controller.push(ScreenB(self))

    def navigate_to_c(self) -> FlowCCoordinator:
        child = FlowCCoordinator(
            weak_callback(self.handle_post_dismissal_actions),
            strict_threading=self.navigation_controller.strict_threading,
        )
        child.start(self.navigation_controller)
        return child

    def navigate_to_root(self) -> None:
        self.navigation_controller.pop_to_root()

    def pop(self) -> None:
        self.navigation_controller.pop()

    def handle_post_dismissal_actions(self) -> ScriptedSequence:
        """Run the scripted hand-back after the child flow finishes."""
        self.post_dismissal = self.run_script(
            post_dismissal_steps(self, self.first_delay, self.second_delay),
            name="post-dismissal",
        )
        return self.post_dismissal


def post_dismissal_steps(
    coordinator: FlowCoordinator,
    first_delay: float,
    second_delay: float,
) -> list[Step]:
    """dismiss → wait → present D → wait → dismiss → push E.

    Steps reach the controller only through a weak reference to the
    coordinator. Its screens point back at it, so holding the controller
    would keep the coordinator (and its scope) alive for as long as a wait
    is pending.
    """
    owner = weakref.ref(coordinator)

    def on_owner(action: Callable[[FlowCoordinator], Any]) -> Callable[[], None]:
        def step() -> None:
            target = owner()
            if target is not None:
                action(target)

        return step

    return [
        Step.mutate("dismiss", on_owner(lambda c: c.navigation_controller.dismiss())),
        Step.wait(first_delay),
        Step.mutate("present D", on_owner(lambda c: c.navigation_controller.present(ScreenD(second_delay)))),
        Step.wait(second_delay),
        Step.mutate("dismiss", on_owner(lambda c: c.navigation_controller.dismiss())),
        Step.mutate("push E", on_owner(lambda c: c.navigation_controller.push(ScreenE(c)))),
    ]
