"""Tests for the shopping sample under both coordinator styles."""
from __future__ import annotations

import io
import random

import pytest
from rich.console import Console

from navkit.demo.models import SAMPLE_PRODUCTS, Category, ShoppingCart, filter_products
from navkit.demo.shop import (
    WALKTHROUGH,
    CartRoute,
    CartScreen,
    CatalogScreen,
    CategoryRoute,
    CheckoutForm,
    CheckoutRoute,
    CheckoutScreen,
    ConfirmationRoute,
    OrderConfirmationScreen,
    ProductDetailScreen,
    ProductRoute,
    RouteShopCoordinator,
    ShopCoordinator,
    walkthrough_prompt,
)
from navkit.tui.router import Router, scripted_ask
from navkit.tui.state import UIState

NOVEL = next(p for p in SAMPLE_PRODUCTS if p.name == "Best-Selling Novel")


# ═══════════════════════════════════════════════════════════════════════════════
# MODELS
# ═══════════════════════════════════════════════════════════════════════════════

def test_filter_products_by_category_and_search():
    books = filter_products(category=Category.BOOKS)
    assert {p.name for p in books} == {"Best-Selling Novel", "Coffee Table Book"}

    assert [p.name for p in filter_products(search="  YOGA ")] == ["Yoga Mat"]
    assert filter_products(category=Category.CLOTHING, search="shoes") == []


def test_cart_totals_and_updates():
    cart = ShoppingCart()
    cart.add_item(NOVEL)
    cart.add_item(NOVEL, 2)

    assert len(cart.items) == 1
    assert cart.item_count == 3
    assert cart.total_price == pytest.approx(3 * 24.99)

    cart.update_quantity(NOVEL, 0)
    assert cart.items == []


def test_checkout_form_validation():
    form = CheckoutForm()
    assert not form.is_valid

    form.fill(**{k: walkthrough_prompt(k.replace("_", " ").capitalize(), "") for k in CheckoutForm.FIELDS})
    assert form.is_valid

    form.fill(email="not-an-email", unknown="ignored")
    assert not form.is_valid


# ═══════════════════════════════════════════════════════════════════════════════
# IMPERATIVE COORDINATOR
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def shop(clock):
    coordinator = ShopCoordinator(
        clock, checkout_delay=2.0, rng=random.Random(7), prompt=walkthrough_prompt
    )
    yield coordinator
    coordinator.close()


def test_shop_purchase_flow(shop, clock):
    """Test detail push, cart sheet, checkout push and confirmation cover."""
    controller = shop.navigation_controller

    shop.show_product_detail(NOVEL)
    detail = controller.top_content()
    assert isinstance(detail, ProductDetailScreen)
    detail.change_quantity(1)
    detail.add_to_cart()
    assert shop.cart.item_count == 2

    shop.show_cart()
    assert isinstance(controller.sheet_route.content, CartScreen)

    shop.show_checkout()
    assert controller.modal is None
    checkout = controller.top_content()
    assert isinstance(checkout, CheckoutScreen)

    checkout.enter_details()
    sequence = checkout.place_order()
    assert sequence is not None
    assert checkout.form.is_processing
    assert checkout.place_order() is None

    clock.advance(2.0)
    confirmation = controller.full_screen_route.content
    assert isinstance(confirmation, OrderConfirmationScreen)
    assert confirmation.order_number.startswith("ORD-")
    assert not checkout.form.is_processing
    assert shop.cart.items == []

    confirmation.continue_shopping()
    assert controller.modal is None
    assert controller.depth == 0


def test_shop_rejects_incomplete_checkout(shop, clock):
    shop.cart.add_item(NOVEL)
    form = CheckoutForm(full_name="Ada")

    assert shop.place_order(form) is None
    assert form.error
    assert clock.pending == 0


def test_shop_rejects_empty_cart(shop):
    form = CheckoutForm()
    form.fill(full_name="Ada", email="a@b.c", address="1 Road", city="Town", zip_code="1")

    assert shop.place_order(form) is None


def test_closing_shop_cancels_pending_order(shop, clock):
    controller = shop.navigation_controller
    shop.cart.add_item(NOVEL)
    form = CheckoutForm()
    form.fill(full_name="Ada", email="a@b.c", address="1 Road", city="Town", zip_code="1")
    shop.place_order(form)

    shop.close()
    clock.run_until_idle()

    assert controller.modal is None
    assert shop.cart.item_count == 1


def test_category_screen_lists_products(shop):
    shop.show_category(Category.SPORTS)
    screen = shop.navigation_controller.top_content()

    assert screen.title == "Sports"
    assert {a.value for a in screen.actions()} == {"product:running-shoes", "product:yoga-mat"}


# ═══════════════════════════════════════════════════════════════════════════════
# DECLARATIVE COORDINATOR
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def route_shop(clock):
    coordinator = RouteShopCoordinator(
        clock, checkout_delay=2.0, rng=random.Random(7), prompt=walkthrough_prompt
    )
    yield coordinator
    coordinator.close()


def test_route_shop_holds_route_values(route_shop, clock):
    """Test intents store plain route values in path and modal."""
    route_shop.show_category(Category.BOOKS)
    route_shop.show_product_detail(NOVEL)
    assert route_shop.path == (CategoryRoute(Category.BOOKS), ProductRoute(NOVEL))

    route_shop.show_cart()
    assert route_shop.sheet_route == CartRoute()

    route_shop.show_checkout()
    assert route_shop.modal is None
    assert route_shop.path[-1] == CheckoutRoute()


def test_route_shop_detail_screen_survives_rerender(route_shop):
    route_shop.show_product_detail(NOVEL)
    route = route_shop.path[-1]

    first = route_shop.content_for(route)
    first.change_quantity(2)

    assert route_shop.content_for(route) is first
    assert route_shop.content_for(route).selected_quantity == 3


def test_route_shop_order_confirmation(route_shop, clock):
    route_shop.cart.add_item(NOVEL)
    route_shop.show_checkout()
    checkout = route_shop.content_for(route_shop.path[-1])
    checkout.enter_details()

    checkout.place_order()
    clock.advance(2.0)

    modal = route_shop.modal
    assert modal.is_full_screen
    assert isinstance(modal.route, ConfirmationRoute)
    assert route_shop.cart.items == []

    screen = route_shop.content_for(modal.route)
    screen.continue_shopping()
    assert route_shop.modal is None
    assert route_shop.path == ()


def test_path_binding_drives_the_shop(route_shop):
    route_shop.path = [CategoryRoute(Category.HOME), ProductRoute(NOVEL)]

    screen = route_shop.content_for(route_shop.path[-1])
    assert screen.product is NOVEL


# ═══════════════════════════════════════════════════════════════════════════════
# ROUTER WALKTHROUGH
# ═══════════════════════════════════════════════════════════════════════════════

EXPECTED_HISTORY = [
    "Catalog",
    "Books",
    "Best-Selling Novel",
    "Best-Selling Novel",
    "Best-Selling Novel",
    "Cart",
    "Checkout",
    "Checkout",
    "Order confirmed",
    "Catalog",
]


@pytest.mark.parametrize("declarative", [False, True])
def test_scripted_walkthrough(clock, declarative):
    """Test the scripted walkthrough buys a book and returns to the catalog."""
    console = Console(file=io.StringIO(), width=100)
    state = UIState()
    if declarative:
        coordinator = RouteShopCoordinator(clock, checkout_delay=1.0, prompt=walkthrough_prompt)
        nav, extra = coordinator, {"content_of": coordinator.content_for}
    else:
        coordinator = ShopCoordinator(clock, checkout_delay=1.0, prompt=walkthrough_prompt)
        nav, extra = coordinator.navigation_controller, {}

    router = Router(
        console=console,
        nav=nav,
        root=coordinator.root_content(),
        state=state,
        ask=scripted_ask(WALKTHROUGH),
        root_label="Catalog",
        after_turn=clock.run_until_idle,
        **extra,
    )
    router.run()
    coordinator.close()

    assert state.session_history == EXPECTED_HISTORY
    assert state.last_action == "continue"
    assert nav.depth == 0
    assert nav.current_modal() is None
    assert coordinator.cart.items == []
    assert "ORD-" in console.file.getvalue()


# ═══════════════════════════════════════════════════════════════════════════════
# CATALOG SEARCH & CART STEPPER
# ═══════════════════════════════════════════════════════════════════════════════

def test_shop_coordinator_threading_flag(clock):
    relaxed = ShopCoordinator(clock, strict_threading=False)
    strict = ShopCoordinator(clock)

    assert relaxed.navigation_controller.strict_threading is False
    assert strict.navigation_controller.strict_threading is True


def test_catalog_search_action(clock):
    """Test the catalog's search action narrows the product list."""
    shop = ShopCoordinator(clock, prompt=lambda label, current: "  watch ")
    catalog = shop.root_content()
    assert isinstance(catalog, CatalogScreen)

    [search] = [a for a in catalog.actions() if a.value == "search"]
    search.handler()

    assert catalog.search == "watch"
    assert [p.name for p in catalog.products] == ["Smart Watch"]
    values = {a.value for a in catalog.actions()}
    assert "product:smart-watch" in values
    assert "product:yoga-mat" not in values

    [clear] = [a for a in catalog.actions() if a.value == "clear_search"]
    clear.handler()
    assert len(catalog.products) == len(SAMPLE_PRODUCTS)
    assert "clear_search" not in {a.value for a in catalog.actions()}


def test_catalog_search_without_matches(clock):
    shop = ShopCoordinator(clock, prompt=lambda label, current: "[tea]")
    catalog = shop.root_content()
    catalog.enter_search()

    assert catalog.products == []
    assert "No products match" in catalog.body()


def test_cart_quantity_stepper(shop):
    """Test the cart sheet's +1/-1 actions update quantities."""
    shop.cart.add_item(NOVEL)
    cart_screen = CartScreen(shop)

    def run(value):
        [action] = [a for a in cart_screen.actions() if a.value == value]
        action.handler()

    run("qty_up:best-selling-novel")
    run("qty_up:best-selling-novel")
    assert shop.cart.item_count == 3

    run("qty_down:best-selling-novel")
    assert shop.cart.item_count == 2

    run("qty_down:best-selling-novel")
    run("qty_down:best-selling-novel")
    assert shop.cart.items == []
    assert [a.value for a in cart_screen.actions()] == ["close"]
