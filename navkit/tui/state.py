"""Session state for remembering user choices across screens."""
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class UIState:
    """UI session state - remembers the last choices made during a session.

    Lives for a single TUI session; nothing here is persisted.
    """

    last_screen: str | None = None
    last_action: str | None = None

    # Session history for analytics/debugging
    session_history: list[str] = field(default_factory=list)

    def remember(self, **kwargs) -> None:
        """Update state with new values.

        Args:
            **kwargs: Attributes to update (e.g., last_action="add")

        Unknown attribute names are ignored.
        """
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)

    def add_to_history(self, screen: str) -> None:
        """Record screen visit in session history.

        Args:
            screen: Title of the screen that was shown
        """
        self.session_history.append(screen)
