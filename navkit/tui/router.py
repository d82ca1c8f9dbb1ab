"""Terminal router: projects navigation state into menus and back again."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable

import questionary
from questionary import Choice
from rich.markup import escape
from rich.panel import Panel

from ..controller import NavigationController, NavigationScope
from ..route import Route
from .render import BRAND_STYLE, breadcrumbs, nav_choices
from .screen import Screen

if TYPE_CHECKING:
    from rich.console import Console

    from ..state import NavigationState
    from .state import UIState

logger = logging.getLogger(__name__)

Ask = Callable[[str, list], "str | None"]


def _questionary_ask(message: str, choices: list) -> str | None:
    return questionary.select(message, choices=choices, style=BRAND_STYLE).ask()


def unwrap_route(element: Any) -> Any:
    """Content lookup for opaque routes."""
    return element.content if isinstance(element, Route) else element


class Router:
    """Main navigation loop with screen dispatch.

    Each turn the router works out the visible screen (modal first, then the
    top of the stack, then the root), shows it, and turns the user's choice
    into either a screen action or a navigation command:

    - back: pop the nested flow, else dismiss the modal, else pop the stack
    - dismiss: clear the modal slot
    - home: dismiss and pop to root
    - exit: leave the loop
    """

    def __init__(
        self,
        console: Console,
        nav: NavigationState,
        root: Screen,
        state: UIState,
        content_of: Callable[[Any], Any] = unwrap_route,
        ask: Ask = _questionary_ask,
        root_label: str | None = None,
        after_turn: Callable[[], Any] | None = None,
    ):
        """Initialize router with dependencies.

        Args:
            console: Rich Console for output
            nav: Navigation state to project (controller or coordinator)
            root: Screen shown when the stack is empty
            state: UI session state
            content_of: Maps a stack/modal element to its screen
            ask: Prompt function returning the chosen value
            root_label: Breadcrumb label for the root screen
            after_turn: Called after each handled choice (e.g. to run due timers)
        """
        self.console = console
        self.nav = nav
        self.root = root
        self.state = state
        self.content_of = content_of
        self.ask = ask
        self.root_label = root_label or root.title or "Home"
        self.after_turn = after_turn

    def visible(self) -> tuple[Screen, NavigationController | None]:
        """Return the screen on top and, for nested flows, their controller."""
        modal = self.nav.current_modal()
        if modal is not None:
            content = self.content_of(modal)
            if isinstance(content, NavigationScope):
                inner = content.controller
                top = inner.top_content()
                return (top if top is not None else content.root), inner
            return content, None

        top = self.nav.snapshot().top
        if top is None:
            return self.root, None
        return self.content_of(top), None

    def run(self) -> None:
        """Run the navigation loop until "exit" is chosen."""
        while True:
            screen, inner = self.visible()
            self.state.add_to_history(screen.title)
            self.state.remember(last_screen=screen.title)

            self.console.print(f"[dim]{escape(breadcrumbs(self.nav.snapshot(), self.root_label))}[/dim]\n")
            body = screen.body()
            if body:
                self.console.print(Panel.fit(body, title=escape(screen.title), border_style="cyan"))

            choices = [Choice(title=a.label, value=a.value) for a in screen.actions()]
            choices += nav_choices(
                include_separator=bool(choices),
                modal=self.nav.current_modal() is not None,
            )

            try:
                result = self.ask(screen.title, choices)
            except KeyboardInterrupt:
                self.console.print("\n[dim]👋 Interrupted. Returning to main menu...[/]")
                self.handle("home", screen, inner)
                continue

            result = self._normalize_nav_result(result)
            if result == "exit":
                self.console.print("\n[dim]👋 Goodbye![/]")
                break
            self.handle(result, screen, inner)
            if self.after_turn is not None:
                self.after_turn()

    def handle(self, result: str | None, screen: Screen, inner: NavigationController | None = None) -> None:
        """Apply one navigation command or screen action."""
        if not result:
            return
        if result == "back":
            if inner is not None and inner.depth > 0:
                inner.pop()
            elif self.nav.current_modal() is not None:
                self.nav.dismiss()
            else:
                self.nav.pop_element()
        elif result == "dismiss":
            self.nav.dismiss()
        elif result == "home":
            self.nav.dismiss()
            self.nav.pop_to_root()
        else:
            for action in screen.actions():
                if action.value == result:
                    self.state.remember(last_action=result)
                    action.handler()
                    return
            logger.warning("No action %r on screen %r", result, screen.title)

    @staticmethod
    def _normalize_nav_result(result: str | None) -> str | None:
        """Normalize common nav aliases/titles to canonical commands.

        Prompts may hand back rendered labels such as "← Back" instead of the
        internal value "back". A cancelled prompt (None) means exit.
        """
        if result is None:
            return "exit"
        s = str(result).strip().lower()
        if not s:
            return None
        if s in {"back", "← back", "< back", "go back", "previous", "prev", "b"}:
            return "back"
        if s in {"home", "main", "main menu", "h"}:
            return "home"
        if s in {"dismiss", "✕ dismiss", "close", "x"}:
            return "dismiss"
        if s in {"exit", "quit", "q"}:
            return "exit"
        return str(result)


def scripted_ask(answers: Iterable[str]) -> Ask:
    """Prompt replacement that replays ``answers`` in order, then exits."""
    remaining = iter(answers)

    def ask(message: str, choices: list) -> str | None:
        return next(remaining, "exit")

    return ask
