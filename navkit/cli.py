from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .clock import AsyncioClock, VirtualClock
from .controller import NavigationController
from .errors import NavKitError
from .logging import setup_logging
from .settings import Settings, load_settings
from .tui.render import StateRenderer, render_error, render_result_panel, render_state
from .tui.router import Router, scripted_ask
from .tui.state import UIState

app = typer.Typer(
    add_completion=False,
    help="navkit: stack + modal navigation engine with sample flows",
    rich_markup_mode="rich",
)
console = Console()


def _settings() -> Settings:
    settings = load_settings()
    setup_logging(settings)
    return settings


# ═══════════════════════════════════════════════════════════════════════════════
# COMMANDS
# ═══════════════════════════════════════════════════════════════════════════════

@app.command("flow", help="[bold cyan]F[/bold cyan]low A–E: child coordinator + timed hand-back")
def flow(
    first_delay: Optional[float] = typer.Option(None, "--first-delay", help="Seconds between dismissing C and presenting D"),
    second_delay: Optional[float] = typer.Option(None, "--second-delay", help="Seconds D stays on screen"),
    interactive: bool = typer.Option(False, "--interactive", "-i", help="Click through the flow with menus"),
):
    """Run the A–E flow, printing the navigation state after every change."""
    settings = _settings()
    d1 = settings.NAVKIT_FLOW_FIRST_DELAY if first_delay is None else first_delay
    d2 = settings.NAVKIT_FLOW_SECOND_DELAY if second_delay is None else second_delay

    try:
        if interactive:
            _interactive_flow(settings, d1, d2)
        else:
            asyncio.run(_scripted_flow(settings, d1, d2))
    except NavKitError as e:
        render_error(console, "Navigation error", str(e))
        raise typer.Exit(code=1)


async def _scripted_flow(settings: Settings, first_delay: float, second_delay: float) -> None:
    from .demo.flow import FlowCoordinator

    coordinator = FlowCoordinator(
        AsyncioClock(),
        NavigationController(strict_threading=settings.NAVKIT_STRICT_THREADING),
        first_delay=first_delay,
        second_delay=second_delay,
    )
    controller = coordinator.navigation_controller
    controller.subscribe(StateRenderer(console, title="Flow", root_label="A"))

    coordinator.navigate_to_b()
    child = coordinator.navigate_to_c()
    child.dismiss_c_then_present_d()

    sequence = coordinator.post_dismissal
    if sequence is not None:
        state = await sequence.wait()
        render_result_panel(console, f"Post-dismissal sequence {state.value}: {', '.join(sequence.executed)}")
    coordinator.close()


def _interactive_flow(settings: Settings, first_delay: float, second_delay: float) -> None:
    from .demo.flow import FlowCoordinator

    clock = VirtualClock()
    coordinator = FlowCoordinator(
        clock,
        NavigationController(strict_threading=settings.NAVKIT_STRICT_THREADING),
        first_delay=first_delay,
        second_delay=second_delay,
    )
    controller = coordinator.navigation_controller
    controller.subscribe(lambda snap: render_state(console, snap, title="Flow", root_label="A"))
    router = Router(
        console=console,
        nav=controller,
        root=coordinator.root_content(),
        state=UIState(),
        after_turn=clock.drain_realtime,
    )
    try:
        router.run()
    except KeyboardInterrupt:
        console.print("\n[dim]👋 Interrupted. Goodbye![/]")
    finally:
        coordinator.close()


@app.command("shop", help="[bold cyan]S[/bold cyan]hopping sample (catalog → cart → checkout)")
def shop(
    declarative: bool = typer.Option(False, "--declarative", "-d", help="Use the route-value coordinator"),
    script: bool = typer.Option(False, "--script", help="Replay a scripted walkthrough instead of prompting"),
    checkout_delay: Optional[float] = typer.Option(None, "--checkout-delay", help="Seconds spent processing an order"),
):
    """Browse the sample shop through the terminal router."""
    from .demo.shop import (
        WALKTHROUGH,
        RouteShopCoordinator,
        ShopCoordinator,
        questionary_text,
        walkthrough_prompt,
    )

    settings = _settings()
    if checkout_delay is None:
        checkout_delay = settings.NAVKIT_CHECKOUT_DELAY
    clock = VirtualClock()
    prompt = walkthrough_prompt if script else questionary_text

    if declarative:
        coordinator = RouteShopCoordinator(
            clock,
            checkout_delay=checkout_delay,
            prompt=prompt,
            strict_threading=settings.NAVKIT_STRICT_THREADING,
        )
        nav = coordinator
        content_of = coordinator.content_for
    else:
        coordinator = ShopCoordinator(
            clock,
            checkout_delay=checkout_delay,
            prompt=prompt,
            strict_threading=settings.NAVKIT_STRICT_THREADING,
        )
        nav = coordinator.navigation_controller
        content_of = None

    state = UIState()
    kwargs = {"content_of": content_of} if content_of is not None else {}
    if script:
        kwargs["ask"] = scripted_ask(WALKTHROUGH)
    router = Router(
        console=console,
        nav=nav,
        root=coordinator.root_content(),
        state=state,
        root_label="Catalog",
        after_turn=clock.run_until_idle if script else clock.drain_realtime,
        **kwargs,
    )

    try:
        router.run()
    except KeyboardInterrupt:
        console.print("\n[dim]👋 Interrupted. Goodbye![/]")
    except NavKitError as e:
        render_error(console, "Navigation error", str(e))
        raise typer.Exit(code=1)
    finally:
        coordinator.close()

    if script:
        render_result_panel(console, f"Walkthrough visited: {' > '.join(state.session_history)}")


@app.command("config", help="[bold cyan]C[/bold cyan]onfiguration currently in effect")
def config():
    """Show the resolved settings."""
    settings = load_settings()
    table = Table(title="[bold]navkit settings[/bold]", show_header=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value", style="cyan")
    for key, value in settings.model_dump().items():
        table.add_row(key, str(value))
    console.print(table)


def main():
    app()
