"""Type-erased route identity for opaque screen content."""
from __future__ import annotations

import uuid
from typing import Any, TypeVar

T = TypeVar("T")


def type_tag_of(content: Any) -> str:
    """Return the default type tag for a piece of content."""
    return type(content).__qualname__


class Route:
    """Wraps arbitrary content with a stable identity and a type tag.

    The engine never inspects or mutates ``content``. Two routes are equal only
    when both the tag and the identifier match, and the identifier is fresh for
    every construction, so pushing the same content twice gives two distinct
    entries.
    """

    __slots__ = ("content", "type_tag", "identifier")

    def __init__(self, content: Any, type_tag: str | None = None):
        self.content = content
        self.type_tag = type_tag or type_tag_of(content)
        self.identifier = uuid.uuid4()

    @property
    def id(self) -> tuple[str, uuid.UUID]:
        """Hashable identity for keyed rendering."""
        return (self.type_tag, self.identifier)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Route):
            return NotImplemented
        return self.type_tag == other.type_tag and self.identifier == other.identifier

    def __hash__(self) -> int:
        return hash((self.type_tag, self.identifier))

    def __repr__(self) -> str:
        return f"Route({self.type_tag}, {str(self.identifier)[:8]})"


def make_route(content: Any, type_tag: str | None = None) -> Route:
    """Create a new route for ``content``. Always succeeds."""
    return Route(content, type_tag)


def try_unwrap(route: Route | None, cls: type[T]) -> T | None:
    """Return the route's content if it is an instance of ``cls``, else None."""
    if route is None:
        return None
    content = route.content
    if isinstance(content, cls):
        return content
    return None
