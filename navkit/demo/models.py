"""Products and cart for the shopping sample."""
from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field


class Category(enum.Enum):
    ELECTRONICS = "Electronics"
    CLOTHING = "Clothing"
    BOOKS = "Books"
    HOME = "Home & Garden"
    SPORTS = "Sports"


@dataclass(frozen=True)
class Product:
    name: str
    description: str
    price: float
    category: Category
    rating: float
    review_count: int
    id: uuid.UUID = field(default_factory=uuid.uuid4)


SAMPLE_PRODUCTS: tuple[Product, ...] = (
    Product(
        name="Wireless Headphones",
        description="Premium noise-cancelling wireless headphones with 30-hour battery life.",
        price=299.99,
        category=Category.ELECTRONICS,
        rating=4.5,
        review_count=1234,
    ),
    Product(
        name="Smart Watch",
        description="Fitness tracking smartwatch with heart rate monitoring and GPS.",
        price=399.99,
        category=Category.ELECTRONICS,
        rating=4.8,
        review_count=892,
    ),
    Product(
        name="Running Shoes",
        description="Lightweight running shoes designed for performance and support.",
        price=129.99,
        category=Category.SPORTS,
        rating=4.6,
        review_count=567,
    ),
    Product(
        name="Denim Jacket",
        description="Classic denim jacket with a modern fit.",
        price=89.99,
        category=Category.CLOTHING,
        rating=4.3,
        review_count=345,
    ),
    Product(
        name="Best-Selling Novel",
        description="A gripping thriller that keeps you guessing until the last page.",
        price=24.99,
        category=Category.BOOKS,
        rating=4.7,
        review_count=2103,
    ),
    Product(
        name="Indoor Plant Set",
        description="Low-maintenance indoor plants to brighten up a living space.",
        price=49.99,
        category=Category.HOME,
        rating=4.4,
        review_count=456,
    ),
    Product(
        name="Yoga Mat",
        description="Non-slip eco-friendly yoga mat with extra cushioning.",
        price=39.99,
        category=Category.SPORTS,
        rating=4.5,
        review_count=789,
    ),
    Product(
        name="Coffee Table Book",
        description="Photography collection of architectural marvels from around the world.",
        price=59.99,
        category=Category.BOOKS,
        rating=4.9,
        review_count=234,
    ),
)


def filter_products(
    products: tuple[Product, ...] = SAMPLE_PRODUCTS,
    category: Category | None = None,
    search: str = "",
) -> list[Product]:
    """Products in ``category`` whose name or description contains ``search``."""
    result = list(products)
    if category is not None:
        result = [p for p in result if p.category is category]
    needle = search.strip().lower()
    if needle:
        result = [p for p in result if needle in p.name.lower() or needle in p.description.lower()]
    return result


@dataclass
class CartItem:
    product: Product
    quantity: int
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def subtotal(self) -> float:
        return self.product.price * self.quantity


class ShoppingCart:
    """Cart shared by every screen of the shopping flow."""

    def __init__(self) -> None:
        self.items: list[CartItem] = []

    @property
    def total_price(self) -> float:
        return sum(item.subtotal for item in self.items)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def add_item(self, product: Product, quantity: int = 1) -> None:
        for item in self.items:
            if item.product.id == product.id:
                item.quantity += quantity
                return
        self.items.append(CartItem(product, quantity))

    def remove_item(self, product: Product) -> None:
        self.items = [item for item in self.items if item.product.id != product.id]

    def update_quantity(self, product: Product, quantity: int) -> None:
        """Set a product's quantity; zero or less removes it."""
        for index, item in enumerate(self.items):
            if item.product.id == product.id:
                if quantity <= 0:
                    del self.items[index]
                else:
                    item.quantity = quantity
                return

    def clear(self) -> None:
        self.items.clear()
