"""Declarative coordinators: navigation state as values of a closed route set.

A coordinator declares its routes either as an ``Enum`` or as a union of
frozen dataclasses (for routes that carry a payload), and registers one
destination per case::

    class Route(enum.Enum):
        HOME = "home"
        CART = "cart"

    class ShopCoordinator(RoutableCoordinator[Route]):
        route_type = Route

        @destination(Route.HOME)
        def home(self, route):
            ...

        @destination(Route.CART)
        def cart(self, route):
            ...

A missing case fails when the class is defined, not when the route is first
rendered.
"""
from __future__ import annotations

import enum
import logging
import typing
from typing import Any, Callable, ClassVar, Iterable, TypeVar

from .errors import IncompleteRouteMapError
from .modal import ModalRoute
from .state import NavigationState

logger = logging.getLogger(__name__)

R = TypeVar("R")

_DESTINATION_ATTR = "__navkit_destinations__"


def destination(*cases: Any) -> Callable[[Callable], Callable]:
    """Mark a method as the content builder for one or more route cases.

    Usage:
        @destination(Route.CART)
        def cart(self, route: Route) -> Any:
            ...
    """
    if not cases:
        raise TypeError("destination() needs at least one route case")

    def decorator(fn: Callable) -> Callable:
        setattr(fn, _DESTINATION_ATTR, getattr(fn, _DESTINATION_ATTR, ()) + cases)
        return fn

    return decorator


def route_cases(route_type: Any) -> list[Any]:
    """List the cases of a route set: enum members, or the union's classes."""
    if isinstance(route_type, type) and issubclass(route_type, enum.Enum):
        return list(route_type)
    args = typing.get_args(route_type)
    if args:
        return list(args)
    if isinstance(route_type, type):
        return [route_type]
    raise TypeError(f"Unsupported route type: {route_type!r}")


def case_of(route: Any) -> Any:
    """The case a route value belongs to (the member itself for enums)."""
    if isinstance(route, enum.Enum):
        return route
    return type(route)


def case_name(case: Any) -> str:
    if isinstance(case, enum.Enum):
        return f"{type(case).__name__}.{case.name}"
    return getattr(case, "__name__", repr(case))


class RoutableCoordinator(NavigationState[R]):
    """Coordinator whose ``path`` and ``modal`` hold route values.

    ``path`` and ``modal`` are plain bindable properties. Readers get immutable
    values and writers assign new ones::

        coordinator.path = (*coordinator.path, Route.CART)
        coordinator.modal = ModalRoute.sheet(Route.CART)

    The imperative-style intents (``push``, ``pop``, ``present`` ...) are
    shorthands for the same assignments.
    """

    route_type: ClassVar[Any] = None
    _destinations: ClassVar[dict[Any, str]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        destinations: dict[Any, str] = {}
        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                for case in getattr(attr, _DESTINATION_ATTR, ()):
                    destinations[case] = name
        cls._destinations = destinations

        # Intermediate base classes may leave the route set open.
        if cls.route_type is None:
            return

        cases = route_cases(cls.route_type)
        unknown = [case for case in destinations if case not in cases]
        if unknown:
            raise TypeError(
                f"{cls.__name__} registers destinations for foreign cases: "
                + ", ".join(case_name(c) for c in unknown)
            )
        missing = [case_name(case) for case in cases if case not in destinations]
        if missing:
            raise IncompleteRouteMapError(cls.__name__, missing)

    # ------------------------------------------------------------------
    # Route -> content
    # ------------------------------------------------------------------

    def is_route(self, value: Any) -> bool:
        cases = route_cases(self.route_type)
        if isinstance(value, enum.Enum):
            return value in cases
        return type(value) in cases

    def content_for(self, route: R) -> Any:
        """Build the content for a route. Total over the declared cases."""
        self._require_route(route)
        return getattr(self, self._destinations[case_of(route)])(route)

    # ------------------------------------------------------------------
    # Bindable state
    # ------------------------------------------------------------------

    @property
    def path(self) -> tuple[R, ...]:
        return self._stack.snapshot()

    @path.setter
    def path(self, routes: Iterable[R]) -> None:
        new_path = list(routes)
        for route in new_path:
            self._require_route(route)
        self._mutate("set_path", lambda: self._stack.replace(new_path))

    @property
    def modal(self) -> ModalRoute[R] | None:
        return self._modal.value

    @modal.setter
    def modal(self, value: ModalRoute[R] | None) -> None:
        if value is not None:
            if not isinstance(value, ModalRoute):
                raise TypeError(f"modal must be a ModalRoute or None, got {value!r}")
            self._require_route(value.route)
        self._mutate("set_modal", lambda: self._modal.set(value))

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def push(self, route: R) -> None:
        self._require_route(route)
        self.push_element(route)

    def pop(self) -> R | None:
        return self.pop_element()

    def present(self, route: R) -> None:
        self._require_route(route)
        self.present_element(route)

    def sheet(self, route: R) -> None:
        self._require_route(route)
        self.sheet_element(route)

    def _require_route(self, value: Any) -> None:
        if self.route_type is None:
            raise TypeError(f"{type(self).__name__} does not declare a route_type")
        if not self.is_route(value):
            raise TypeError(f"{value!r} is not a route of {type(self).__name__}")
