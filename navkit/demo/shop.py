"""Shopping sample: catalog, detail, cart sheet, checkout, confirmation cover.

The same screens are driven by two coordinators:

- ``ShopCoordinator`` pushes and presents opaque screen objects through a
  ``NavigationController``.
- ``RouteShopCoordinator`` keeps ``ShopRoute`` values in its path and modal and
  builds screens from them on demand.
"""
from __future__ import annotations

import logging
import random
import weakref
from dataclasses import dataclass, field
from typing import Any, Callable

import questionary
from rich.markup import escape
from rich.table import Table

from ..child import Coordinator
from ..clock import Clock
from ..controller import NavigationController
from ..coordinator import RoutableCoordinator, destination
from ..sequence import LifetimeScope, ScriptedSequence, Step
from ..tui.screen import Action, Screen
from .models import SAMPLE_PRODUCTS, Category, Product, ShoppingCart, filter_products

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# CHECKOUT FORM
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class CheckoutForm:
    full_name: str = ""
    email: str = ""
    address: str = ""
    city: str = ""
    zip_code: str = ""
    is_processing: bool = False
    error: str | None = None

    FIELDS = ("full_name", "email", "address", "city", "zip_code")

    @property
    def is_valid(self) -> bool:
        return (
            bool(self.full_name)
            and bool(self.email)
            and "@" in self.email
            and bool(self.address)
            and bool(self.city)
            and bool(self.zip_code)
        )

    def fill(self, **values: str) -> None:
        for key, value in values.items():
            if key in self.FIELDS:
                setattr(self, key, value.strip())


def questionary_text(label: str, current: str) -> str:
    return questionary.text(label, default=current).ask() or ""


# ═══════════════════════════════════════════════════════════════════════════════
# SHARED FLOW LOGIC
# ═══════════════════════════════════════════════════════════════════════════════

class ShopFlow:
    """Intents shared by both shop coordinators.

    Concrete coordinators provide ``cart``, ``clock``, ``scope``, ``rng``,
    ``checkout_delay``, ``prompt``, the intents stubbed below and ``pop_to_root``.
    """

    cart: ShoppingCart
    clock: Clock
    scope: LifetimeScope
    rng: random.Random
    checkout_delay: float
    prompt: Callable[[str, str], str]

    def show_product_detail(self, product: Product) -> None:
        raise NotImplementedError

    def show_category(self, category: Category) -> None:
        raise NotImplementedError

    def show_cart(self) -> None:
        raise NotImplementedError

    def show_checkout(self) -> None:
        raise NotImplementedError

    def show_order_confirmation(self, order_number: str) -> None:
        raise NotImplementedError

    def dismiss_modal(self) -> None:
        raise NotImplementedError

    def new_order_number(self) -> str:
        return f"ORD-{self.rng.randint(100000, 999999)}"

    def place_order(self, form: CheckoutForm) -> ScriptedSequence | None:
        """Submit the checkout form; confirmation shows after a processing wait.

        Returns None (and records an error on the form) when the form is
        incomplete or an order is already being processed.
        """
        if form.is_processing:
            return None
        if not form.is_valid or not self.cart.items:
            form.error = "Please complete every field with a valid email address."
            return None

        form.error = None
        form.is_processing = True
        order_number = self.new_order_number()
        owner = weakref.ref(self)

        def confirm() -> None:
            form.is_processing = False
            flow = owner()
            if flow is not None:
                flow.show_order_confirmation(order_number)

        logger.info("Placing order %s (%d items)", order_number, self.cart.item_count)
        return ScriptedSequence(
            [Step.wait(self.checkout_delay), Step.mutate("confirm order", confirm)],
            self.clock,
            self.scope,
            name=f"order {order_number}",
        ).start()


# ═══════════════════════════════════════════════════════════════════════════════
# SCREENS
# ═══════════════════════════════════════════════════════════════════════════════

def _price(value: float) -> str:
    return f"${value:,.2f}"


def _slug(name: str) -> str:
    return name.lower().replace(" ", "-")


def _product_table(products: list[Product]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Product")
    table.add_column("Category", style="dim")
    table.add_column("Price", justify="right", style="cyan")
    table.add_column("Rating", justify="right")
    for p in products:
        table.add_row(p.name, p.category.value, _price(p.price), f"★ {p.rating} ({p.review_count:,})")
    return table


class CatalogScreen(Screen):
    title = "Catalog"

    def __init__(self, flow: ShopFlow, search: str = "", category: Category | None = None):
        self.flow = flow
        self.search = search
        self.category = category

    @property
    def products(self) -> list[Product]:
        return filter_products(SAMPLE_PRODUCTS, self.category, self.search)

    def enter_search(self) -> None:
        self.search = self.flow.prompt("Search", self.search).strip()

    def clear_search(self) -> None:
        self.search = ""

    def body(self) -> Any:
        products = self.products
        if not products:
            return f"No products match \"{escape(self.search)}\"."
        return _product_table(products)

    def actions(self) -> list[Action]:
        actions = [
            Action(f"View {p.name}", f"product:{_slug(p.name)}", lambda p=p: self.flow.show_product_detail(p))
            for p in self.products
        ]
        actions.append(Action("Search products", "search", self.enter_search))
        if self.search:
            actions.append(Action(f"Clear search ({self.search})", "clear_search", self.clear_search))
        actions += [
            Action(f"Browse {c.value}", f"category:{c.name}", lambda c=c: self.flow.show_category(c))
            for c in Category
        ]
        actions.append(Action(f"Cart ({self.flow.cart.item_count})", "cart", self.flow.show_cart))
        return actions


class CategoryScreen(Screen):
    def __init__(self, category: Category, flow: ShopFlow):
        self.category = category
        self.flow = flow
        self.title = category.value

    @property
    def products(self) -> list[Product]:
        return filter_products(SAMPLE_PRODUCTS, self.category)

    def body(self) -> Any:
        return _product_table(self.products)

    def actions(self) -> list[Action]:
        return [
            Action(f"View {p.name}", f"product:{_slug(p.name)}", lambda p=p: self.flow.show_product_detail(p))
            for p in self.products
        ]


class ProductDetailScreen(Screen):
    def __init__(self, product: Product, flow: ShopFlow):
        self.product = product
        self.flow = flow
        self.title = product.name
        self.selected_quantity = 1
        self.added = False

    def add_to_cart(self) -> None:
        self.flow.cart.add_item(self.product, self.selected_quantity)
        self.added = True

    def change_quantity(self, delta: int) -> None:
        self.selected_quantity = max(1, self.selected_quantity + delta)

    def body(self) -> str:
        p = self.product
        text = (
            f"{p.description}\n\n"
            f"[bold]{_price(p.price)}[/bold]  ★ {p.rating} ({p.review_count:,} reviews)\n"
            f"Quantity: {self.selected_quantity}"
        )
        if self.added:
            text += "\n\n[green]✓ Added to cart[/green]"
        return text

    def actions(self) -> list[Action]:
        return [
            Action("Add to cart", "add", self.add_to_cart),
            Action("Quantity +1", "qty_up", lambda: self.change_quantity(1)),
            Action("Quantity -1", "qty_down", lambda: self.change_quantity(-1)),
            Action("View cart", "cart", self.flow.show_cart),
        ]


class CartScreen(Screen):
    title = "Cart"

    def __init__(self, flow: ShopFlow):
        self.flow = flow

    def body(self) -> Any:
        cart = self.flow.cart
        if not cart.items:
            return "Your cart is empty."
        table = Table(show_header=True, header_style="bold")
        table.add_column("Item")
        table.add_column("Qty", justify="right")
        table.add_column("Subtotal", justify="right", style="cyan")
        for item in cart.items:
            table.add_row(item.product.name, str(item.quantity), _price(item.subtotal))
        table.add_row("[bold]Total[/bold]", str(cart.item_count), f"[bold]{_price(cart.total_price)}[/bold]")
        return table

    def actions(self) -> list[Action]:
        cart = self.flow.cart
        actions: list[Action] = []
        for item in cart.items:
            name, slug = item.product.name, _slug(item.product.name)
            actions += [
                Action(f"{name}: quantity +1", f"qty_up:{slug}",
                       lambda item=item: cart.update_quantity(item.product, item.quantity + 1)),
                Action(f"{name}: quantity -1", f"qty_down:{slug}",
                       lambda item=item: cart.update_quantity(item.product, item.quantity - 1)),
                Action(f"Remove {name}", f"remove:{slug}", lambda p=item.product: cart.remove_item(p)),
            ]
        if cart.items:
            actions.append(Action("Proceed to checkout", "checkout", self.flow.show_checkout))
        actions.append(Action("Close", "close", self.flow.dismiss_modal))
        return actions


class CheckoutScreen(Screen):
    title = "Checkout"

    def __init__(
        self,
        flow: ShopFlow,
        form: CheckoutForm,
        prompt: Callable[[str, str], str] = questionary_text,
    ):
        self.flow = flow
        self.form = form
        self.prompt = prompt

    def enter_details(self) -> None:
        for name in CheckoutForm.FIELDS:
            label = name.replace("_", " ").capitalize()
            self.form.fill(**{name: self.prompt(label, getattr(self.form, name))})

    def place_order(self) -> ScriptedSequence | None:
        return self.flow.place_order(self.form)

    def body(self) -> str:
        f = self.form
        lines = [
            f"Items: {self.flow.cart.item_count}   Total: [bold]{_price(self.flow.cart.total_price)}[/bold]",
            "",
            f"Name:    {f.full_name or '-'}",
            f"Email:   {f.email or '-'}",
            f"Address: {f.address or '-'}, {f.city or '-'} {f.zip_code}",
        ]
        if f.is_processing:
            lines.append("\n[yellow]Processing order...[/yellow]")
        if f.error:
            lines.append(f"\n[red]{f.error}[/red]")
        return "\n".join(lines)

    def actions(self) -> list[Action]:
        return [
            Action("Enter shipping details", "details", self.enter_details),
            Action("Place order", "place", self.place_order),
        ]


class OrderConfirmationScreen(Screen):
    title = "Order confirmed"

    def __init__(self, order_number: str, flow: ShopFlow):
        self.order_number = order_number
        self.flow = flow

    def continue_shopping(self) -> None:
        self.flow.dismiss_modal()
        self.flow.pop_to_root()

    def body(self) -> str:
        return f"[bold green]✓ Thank you![/bold green]\n\nOrder number: [cyan]{self.order_number}[/cyan]"

    def actions(self) -> list[Action]:
        return [Action("Continue shopping", "continue", self.continue_shopping)]


# ═══════════════════════════════════════════════════════════════════════════════
# IMPERATIVE COORDINATOR
# ═══════════════════════════════════════════════════════════════════════════════

class ShopCoordinator(ShopFlow, Coordinator):
    """Drives the shop by pushing and presenting screen objects."""

    def __init__(
        self,
        clock: Clock,
        cart: ShoppingCart | None = None,
        checkout_delay: float = 2.0,
        rng: random.Random | None = None,
        scope: LifetimeScope | None = None,
        prompt: Callable[[str, str], str] = questionary_text,
        strict_threading: bool = True,
    ):
        super().__init__(clock, NavigationController(strict_threading=strict_threading), scope)
        self.cart = cart or ShoppingCart()
        self.checkout_delay = checkout_delay
        self.rng = rng or random.Random()
        self.prompt = prompt

    def root_content(self) -> Screen:
        return CatalogScreen(self)

    def show_product_detail(self, product: Product) -> None:
        self.navigation_controller.push(ProductDetailScreen(product, self))

    def show_category(self, category: Category) -> None:
        self.navigation_controller.push(CategoryScreen(category, self))

    def show_cart(self) -> None:
        self.navigation_controller.sheet(CartScreen(self))

    def show_checkout(self) -> None:
        self.navigation_controller.dismiss()
        self.navigation_controller.push(CheckoutScreen(self, CheckoutForm(), self.prompt))

    def show_order_confirmation(self, order_number: str) -> None:
        self.cart.clear()
        self.navigation_controller.present(OrderConfirmationScreen(order_number, self))

    def dismiss_modal(self) -> None:
        self.navigation_controller.dismiss()

    def pop_to_root(self) -> None:
        self.navigation_controller.pop_to_root()


# ═══════════════════════════════════════════════════════════════════════════════
# DECLARATIVE COORDINATOR
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ProductRoute:
    product: Product

    @property
    def title(self) -> str:
        return self.product.name


@dataclass(frozen=True)
class CategoryRoute:
    category: Category

    @property
    def title(self) -> str:
        return self.category.value


@dataclass(frozen=True)
class CartRoute:
    title: str = field(default="Cart", compare=False)


@dataclass(frozen=True)
class CheckoutRoute:
    title: str = field(default="Checkout", compare=False)


@dataclass(frozen=True)
class ConfirmationRoute:
    order_number: str

    @property
    def title(self) -> str:
        return "Order confirmed"


ShopRoute = ProductRoute | CategoryRoute | CartRoute | CheckoutRoute | ConfirmationRoute


class RouteShopCoordinator(ShopFlow, RoutableCoordinator[ShopRoute]):
    """Drives the shop by storing ``ShopRoute`` values.

    Screens are rebuilt from routes whenever the renderer asks, so state that
    must outlive a render (the checkout form) lives on the coordinator.
    """

    route_type = ShopRoute

    def __init__(
        self,
        clock: Clock,
        cart: ShoppingCart | None = None,
        checkout_delay: float = 2.0,
        rng: random.Random | None = None,
        scope: LifetimeScope | None = None,
        prompt: Callable[[str, str], str] = questionary_text,
        strict_threading: bool = True,
    ):
        super().__init__(strict_threading=strict_threading)
        self.clock = clock
        name = type(self).__name__
        self.scope = (scope.child(name) if scope is not None else LifetimeScope(name)).bind_owner(self)
        self.cart = cart or ShoppingCart()
        self.checkout_delay = checkout_delay
        self.rng = rng or random.Random()
        self.prompt = prompt
        self.checkout_form = CheckoutForm()
        self._detail_screens: dict[ProductRoute, ProductDetailScreen] = {}

    def root_content(self) -> Screen:
        return CatalogScreen(self)

    @destination(ProductRoute)
    def product_screen(self, route: ProductRoute) -> Screen:
        # Quantity picks survive re-renders while the route stays on the path.
        self._detail_screens = {r: s for r, s in self._detail_screens.items() if r in self.path}
        screen = self._detail_screens.get(route)
        if screen is None:
            screen = self._detail_screens[route] = ProductDetailScreen(route.product, self)
        return screen

    @destination(CategoryRoute)
    def category_screen(self, route: CategoryRoute) -> Screen:
        return CategoryScreen(route.category, self)

    @destination(CartRoute)
    def cart_screen(self, route: CartRoute) -> Screen:
        return CartScreen(self)

    @destination(CheckoutRoute)
    def checkout_screen(self, route: CheckoutRoute) -> Screen:
        return CheckoutScreen(self, self.checkout_form, self.prompt)

    @destination(ConfirmationRoute)
    def confirmation_screen(self, route: ConfirmationRoute) -> Screen:
        return OrderConfirmationScreen(route.order_number, self)

    def show_product_detail(self, product: Product) -> None:
        self.push(ProductRoute(product))

    def show_category(self, category: Category) -> None:
        self.push(CategoryRoute(category))

    def show_cart(self) -> None:
        self.sheet(CartRoute())

    def show_checkout(self) -> None:
        self.dismiss()
        self.checkout_form = CheckoutForm()
        self.push(CheckoutRoute())

    def show_order_confirmation(self, order_number: str) -> None:
        self.cart.clear()
        self.present(ConfirmationRoute(order_number))

    def dismiss_modal(self) -> None:
        self.dismiss()

    def close(self) -> None:
        self.scope.close()


# ═══════════════════════════════════════════════════════════════════════════════
# SCRIPTED WALKTHROUGH
# ═══════════════════════════════════════════════════════════════════════════════

# Choices replayed by `navkit shop --script`: browse, buy, check out, finish.
WALKTHROUGH: tuple[str, ...] = (
    "category:BOOKS",
    "product:best-selling-novel",
    "qty_up",
    "add",
    "cart",
    "checkout",
    "details",
    "place",
    "continue",
    "exit",
)

WALKTHROUGH_DETAILS: dict[str, str] = {
    "Full name": "Ada Lovelace",
    "Email": "ada@example.com",
    "Address": "12 Analytical Street",
    "City": "London",
    "Zip code": "N1 9GU",
}


def walkthrough_prompt(label: str, current: str) -> str:
    return WALKTHROUGH_DETAILS.get(label, current)
