"""Unit tests for declarative coordinators over closed route sets."""
from __future__ import annotations

import enum
import random
from dataclasses import dataclass

import pytest

from navkit.coordinator import RoutableCoordinator, destination, route_cases
from navkit.errors import IncompleteRouteMapError
from navkit.modal import ModalRoute


class Page(enum.Enum):
    HOME = "home"
    SETTINGS = "settings"
    ABOUT = "about"


class PageCoordinator(RoutableCoordinator[Page]):
    route_type = Page

    @destination(Page.HOME)
    def home(self, route):
        return "home screen"

    @destination(Page.SETTINGS, Page.ABOUT)
    def info(self, route):
        return f"{route.value} screen"


@dataclass(frozen=True)
class Detail:
    item_id: int


@dataclass(frozen=True)
class Listing:
    query: str = ""


class ItemCoordinator(RoutableCoordinator[Detail | Listing]):
    route_type = Detail | Listing

    @destination(Detail)
    def detail(self, route):
        return ("detail", route.item_id)

    @destination(Listing)
    def listing(self, route):
        return ("listing", route.query)


def test_route_cases_for_enum_and_union():
    assert route_cases(Page) == [Page.HOME, Page.SETTINGS, Page.ABOUT]
    assert route_cases(Detail | Listing) == [Detail, Listing]
    assert route_cases(Detail) == [Detail]


def test_missing_destination_fails_at_class_definition():
    """Test an unmapped route case is reported when the class is defined."""
    with pytest.raises(IncompleteRouteMapError) as excinfo:

        class Partial(RoutableCoordinator[Page]):
            route_type = Page

            @destination(Page.HOME)
            def home(self, route):
                return "home"

    assert excinfo.value.coordinator == "Partial"
    assert excinfo.value.missing == ["Page.SETTINGS", "Page.ABOUT"]


def test_destination_for_foreign_case_is_rejected():
    class Other(enum.Enum):
        X = "x"

    with pytest.raises(TypeError):

        class Confused(PageCoordinator):
            @destination(Other.X)
            def other(self, route):
                return "x"


def test_subclass_inherits_destinations():
    class Themed(PageCoordinator):
        @destination(Page.HOME)
        def home(self, route):
            return "themed home"

    coordinator = Themed()
    assert coordinator.content_for(Page.HOME) == "themed home"
    assert coordinator.content_for(Page.ABOUT) == "about screen"


def test_destination_needs_a_case():
    with pytest.raises(TypeError):
        destination()


def test_content_for_every_case():
    """Test each declared route maps to content."""
    coordinator = PageCoordinator()
    assert [coordinator.content_for(p) for p in Page] == [
        "home screen",
        "settings screen",
        "about screen",
    ]

    items = ItemCoordinator()
    assert items.content_for(Detail(7)) == ("detail", 7)
    assert items.content_for(Listing("lamp")) == ("listing", "lamp")


def test_push_pop_and_path():
    coordinator = PageCoordinator()
    coordinator.push(Page.SETTINGS)
    coordinator.push(Page.ABOUT)

    assert coordinator.path == (Page.SETTINGS, Page.ABOUT)
    assert coordinator.pop() is Page.ABOUT
    assert coordinator.path == (Page.SETTINGS,)

    coordinator.pop_to_root()
    assert coordinator.path == ()
    assert coordinator.pop() is None


def test_path_is_bindable():
    """Test assigning a whole path replaces the stack and notifies once."""
    coordinator = ItemCoordinator()
    seen = []
    coordinator.subscribe(seen.append)

    coordinator.path = [Listing("desk"), Detail(1), Detail(2)]

    assert coordinator.path == (Listing("desk"), Detail(1), Detail(2))
    assert len(seen) == 1
    assert seen[0].depth == 3


def test_path_rejects_foreign_values():
    coordinator = ItemCoordinator()
    coordinator.push(Detail(1))

    with pytest.raises(TypeError):
        coordinator.path = [Detail(2), "not a route"]

    assert coordinator.path == (Detail(1),)


def test_modal_is_bindable():
    """Test the modal slot holds a styled route value."""
    coordinator = PageCoordinator()

    coordinator.modal = ModalRoute.sheet(Page.SETTINGS)
    assert coordinator.sheet_route is Page.SETTINGS
    assert coordinator.modal.is_sheet

    coordinator.modal = ModalRoute.full_screen(Page.ABOUT)
    assert coordinator.sheet_route is None
    assert coordinator.full_screen_route is Page.ABOUT

    coordinator.modal = None
    assert coordinator.modal is None


def test_modal_rejects_bad_values():
    coordinator = PageCoordinator()

    with pytest.raises(TypeError):
        coordinator.modal = Page.HOME
    with pytest.raises(TypeError):
        coordinator.modal = ModalRoute.sheet(Detail(1))


def test_sheet_present_dismiss_intents():
    coordinator = ItemCoordinator()

    coordinator.sheet(Listing())
    assert coordinator.modal == ModalRoute.sheet(Listing())

    coordinator.present(Detail(3))
    assert coordinator.modal.as_sheet() is None
    assert coordinator.modal.as_full_screen().route == Detail(3)

    coordinator.dismiss()
    assert coordinator.current_modal() is None


def test_intents_reject_foreign_values():
    coordinator = ItemCoordinator()

    with pytest.raises(TypeError):
        coordinator.push(Page.HOME)
    with pytest.raises(TypeError):
        coordinator.present("detail")
    with pytest.raises(TypeError):
        coordinator.content_for(42)


def test_open_base_class_has_no_routes():
    class Base(RoutableCoordinator):
        pass

    with pytest.raises(TypeError):
        Base().push(Page.HOME)


def test_present_then_sheet_replaces_cover():
    coordinator = PageCoordinator()

    coordinator.present(Page.ABOUT)
    coordinator.sheet(Page.SETTINGS)

    assert coordinator.full_screen_route is None
    assert coordinator.sheet_route is Page.SETTINGS
    assert coordinator.modal == ModalRoute.sheet(Page.SETTINGS)


def test_same_route_pushed_twice_pops_twice():
    coordinator = ItemCoordinator()
    coordinator.push(Detail(1))
    coordinator.push(Detail(1))

    assert coordinator.depth == 2
    assert coordinator.pop() == Detail(1)
    assert coordinator.pop() == Detail(1)
    assert coordinator.path == ()


@pytest.mark.parametrize("seed", range(10))
def test_modal_walk_never_shows_both_styles(seed):
    """Test random modal intents and assignments keep the styles exclusive."""
    coordinator = PageCoordinator()
    rng = random.Random(seed)
    for _ in range(50):
        page = rng.choice(list(Page))
        op = rng.choice(["present", "sheet", "dismiss", "assign"])
        if op == "dismiss":
            coordinator.dismiss()
            expected = None
        elif op == "assign":
            expected = rng.choice([ModalRoute.sheet(page), ModalRoute.full_screen(page), None])
            coordinator.modal = expected
        else:
            getattr(coordinator, op)(page)
            expected = ModalRoute.sheet(page) if op == "sheet" else ModalRoute.full_screen(page)

        assert coordinator.modal == expected
        assert coordinator.sheet_route is None or coordinator.full_screen_route is None
