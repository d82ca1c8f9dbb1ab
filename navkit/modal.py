"""Modal presentation: the sheet/full-screen tagged value and its slot."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

E = TypeVar("E")


class ModalStyle(enum.Enum):
    SHEET = "sheet"
    FULL_SCREEN = "full_screen"


@dataclass(frozen=True)
class ModalRoute(Generic[E]):
    """One presented modal: a style plus the route shown in it."""

    style: ModalStyle
    route: E

    @classmethod
    def sheet(cls, route: E) -> ModalRoute[E]:
        return cls(ModalStyle.SHEET, route)

    @classmethod
    def full_screen(cls, route: E) -> ModalRoute[E]:
        return cls(ModalStyle.FULL_SCREEN, route)

    @property
    def is_sheet(self) -> bool:
        return self.style is ModalStyle.SHEET

    @property
    def is_full_screen(self) -> bool:
        return self.style is ModalStyle.FULL_SCREEN

    def as_sheet(self) -> ModalRoute[E] | None:
        """Return self when presented as a sheet, otherwise None."""
        return self if self.is_sheet else None

    def as_full_screen(self) -> ModalRoute[E] | None:
        """Return self when presented full screen, otherwise None."""
        return self if self.is_full_screen else None

    @property
    def id(self) -> Any:
        route_id = getattr(self.route, "id", None)
        return (self.style.value, route_id if route_id is not None else self.route)


class ModalSlot(Generic[E]):
    """Holds at most one modal.

    Presenting either style replaces whatever was shown before, so a sheet and
    a full-screen cover are never active at the same time.
    """

    def __init__(self) -> None:
        self._value: ModalRoute[E] | None = None

    @property
    def value(self) -> ModalRoute[E] | None:
        return self._value

    def present(self, route: E) -> None:
        self._value = ModalRoute.full_screen(route)

    def sheet(self, route: E) -> None:
        self._value = ModalRoute.sheet(route)

    def set(self, modal: ModalRoute[E] | None) -> None:
        self._value = modal

    def dismiss(self) -> None:
        self._value = None

    def current(self) -> E | None:
        """The route inside whichever style is active, or None."""
        return self._value.route if self._value is not None else None

    @property
    def sheet_route(self) -> E | None:
        if self._value is not None and self._value.is_sheet:
            return self._value.route
        return None

    @property
    def full_screen_route(self) -> E | None:
        if self._value is not None and self._value.is_full_screen:
            return self._value.route
        return None

    def __repr__(self) -> str:
        return f"ModalSlot({self._value!r})"
