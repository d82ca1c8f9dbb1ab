"""TUI (Terminal User Interface) rendering layer for navkit.

Projects navigation state into rich output and questionary menus, and routes
Back/Home/Dismiss choices into the navigation API.
"""
from .render import StateRenderer, breadcrumbs, label_for, render_state
from .router import Router
from .screen import Action, Screen
from .state import UIState

__all__ = [
    "Action",
    "Router",
    "Screen",
    "StateRenderer",
    "UIState",
    "breadcrumbs",
    "label_for",
    "render_state",
]
