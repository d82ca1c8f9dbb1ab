"""Rich projection of navigation state for the terminal."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

import questionary
from questionary import Choice, Separator
from rich.markup import escape
from rich.panel import Panel
from rich.tree import Tree

from ..controller import NavigationScope
from ..route import Route

if TYPE_CHECKING:
    from rich.console import Console

    from ..state import NavigationSnapshot


# ═══════════════════════════════════════════════════════════════════════════════
# BRAND STYLING
# ═══════════════════════════════════════════════════════════════════════════════

BRAND_STYLE = questionary.Style([
    ("qmark", "fg:#00b4d8 bold"),         # Cyan accent
    ("question", "bold"),
    ("answer", "fg:#90e0ef bold"),         # Light cyan for answers
    ("highlighted", "fg:#00b4d8 bold"),    # Highlighted item
    ("pointer", "fg:#00b4d8 bold"),        # Arrow pointer
    ("selected", "fg:#90e0ef"),            # Selected item
])


# ═══════════════════════════════════════════════════════════════════════════════
# LABELS
# ═══════════════════════════════════════════════════════════════════════════════

def label_for(element: Any) -> str:
    """Human-readable label for a stack or modal element.

    Opaque routes are labelled by their content's ``title`` when it has one,
    otherwise by their type tag. Enum routes use their value, other route
    values their class name.
    """
    if isinstance(element, Route):
        content = element.content
        if isinstance(content, NavigationScope):
            return f"{label_for(content.root)} (flow)"
        title = getattr(content, "title", None)
        return title if isinstance(title, str) and title else element.type_tag
    title = getattr(element, "title", None)
    if isinstance(title, str) and title:
        return title
    value = getattr(element, "value", None)
    if isinstance(value, str):
        return value.replace("_", " ").title()
    return type(element).__name__


def breadcrumbs(
    snapshot: NavigationSnapshot,
    root_label: str = "Home",
    label: Callable[[Any], str] = label_for,
) -> str:
    """Breadcrumb path like "Home > Catalog > Wireless Headphones".

    An active modal is appended in parentheses.
    """
    labels = [root_label] + [label(element) for element in snapshot.path]
    trail = " > ".join(labels)
    if snapshot.modal is not None:
        style = "sheet" if snapshot.modal.is_sheet else "full screen"
        trail += f" ({style}: {label(snapshot.modal.route)})"
    return trail


# ═══════════════════════════════════════════════════════════════════════════════
# STATE RENDERING
# ═══════════════════════════════════════════════════════════════════════════════

def state_tree(
    snapshot: NavigationSnapshot,
    root_label: str = "Home",
    label: Callable[[Any], str] = label_for,
) -> Tree:
    tree = Tree(f"[bold cyan]{escape(root_label)}[/bold cyan] [dim](root)[/dim]")
    node = tree
    for index, element in enumerate(snapshot.path, 1):
        node = node.add(f"[cyan]{index}[/cyan] {escape(label(element))}")
    if snapshot.modal is not None:
        style = "sheet" if snapshot.modal.is_sheet else "full screen"
        tree.add(f"[magenta]◆ {style}[/magenta] {escape(label(snapshot.modal.route))}")
    return tree


def render_state(
    console: Console,
    snapshot: NavigationSnapshot,
    title: str = "Navigation",
    root_label: str = "Home",
) -> None:
    """Render the stack and modal slot as a tree inside a panel."""
    console.print(Panel.fit(state_tree(snapshot, root_label), title=title, border_style="dim"))


class StateRenderer:
    """Listener that re-renders the navigation state after every change."""

    def __init__(self, console: Console, title: str = "Navigation", root_label: str = "Home"):
        self.console = console
        self.title = title
        self.root_label = root_label
        self.frames = 0

    def __call__(self, snapshot: NavigationSnapshot) -> None:
        self.frames += 1
        render_state(
            self.console,
            snapshot,
            title=f"{self.title} #{self.frames}",
            root_label=self.root_label,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# PANELS & CHOICES
# ═══════════════════════════════════════════════════════════════════════════════

def nav_choices(include_separator: bool = True, modal: bool = False) -> list:
    """Standard Back/Home navigation choices, plus Dismiss over a modal."""
    choices: list = []
    if include_separator:
        choices.append(Separator())
    if modal:
        choices.append(Choice(title="✕ Dismiss", value="dismiss"))
    choices.extend([
        Choice(title="← Back", value="back"),
        Choice(title="Home", value="home"),
        Choice(title="Exit", value="exit"),
    ])
    return choices


def render_result_panel(console: Console, message: str, is_error: bool = False) -> None:
    style = "red" if is_error else "green"
    icon = "✗" if is_error else "✓"
    console.print(Panel.fit(f"[bold {style}]{icon} {message}[/bold {style}]",
                            title="Error" if is_error else "Result"))
    console.print()


def render_error(
    console: Console,
    title: str,
    cause: str,
    action: str | None = None,
) -> None:
    """Render a friendly error panel with 3-part structure.

    Args:
        console: Rich Console for output
        title: Error title
        cause: What caused the error
        action: Suggested action to resolve
    """
    content = f"[bold red]✗ {title}[/bold red]\n\n"
    content += f"[yellow]Cause:[/yellow] {cause}\n"

    if action:
        content += f"\n[dim]→ {action}[/dim]"

    console.print(Panel.fit(content, border_style="red", title="Error"))
    console.print()
