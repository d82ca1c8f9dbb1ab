"""navkit: navigation state for stack-based user interfaces.

Tracks a stack of pushed screens plus at most one modal (sheet or full
screen), and lets a rendering layer observe and project that state.
"""
from .child import ChildCoordinator, Coordinator, CoordinatorState, one_shot, weak_callback
from .clock import AsyncioClock, VirtualClock
from .controller import NavigationController, NavigationScope
from .coordinator import RoutableCoordinator, destination
from .errors import (
    CoordinatorStateError,
    IncompleteRouteMapError,
    NavKitError,
    SequenceStateError,
    ThreadAffinityError,
)
from .modal import ModalRoute, ModalSlot, ModalStyle
from .route import Route, make_route, try_unwrap
from .sequence import LifetimeScope, ScriptedSequence, SequenceState, Step
from .stack import NavigationStack, PopOutcome, PopResult
from .state import NavigationSnapshot, NavigationState

__all__ = [
    "AsyncioClock",
    "ChildCoordinator",
    "Coordinator",
    "CoordinatorState",
    "CoordinatorStateError",
    "IncompleteRouteMapError",
    "LifetimeScope",
    "ModalRoute",
    "ModalSlot",
    "ModalStyle",
    "NavKitError",
    "NavigationController",
    "NavigationScope",
    "NavigationSnapshot",
    "NavigationStack",
    "NavigationState",
    "PopOutcome",
    "PopResult",
    "RoutableCoordinator",
    "Route",
    "ScriptedSequence",
    "SequenceState",
    "SequenceStateError",
    "Step",
    "ThreadAffinityError",
    "VirtualClock",
    "destination",
    "make_route",
    "one_shot",
    "try_unwrap",
    "weak_callback",
]
