from __future__ import annotations

import logging
import os
import sys

import pytest


def _ensure_project_root_on_path() -> None:
    # When running via the venv's pytest entrypoint, the CWD is not guaranteed to
    # be on sys.path. Ensure the repository root (containing `navkit/`) is importable.
    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if project_root not in sys.path:
        sys.path.insert(0, project_root)


_ensure_project_root_on_path()

from navkit.clock import VirtualClock  # noqa: E402
from navkit.controller import NavigationController  # noqa: E402


@pytest.fixture
def clock():
    """Manually advanced clock; no test sleeps."""
    return VirtualClock()


@pytest.fixture
def controller():
    return NavigationController()


@pytest.fixture
def restore_root_logging():
    """Put the root logger back the way it was after setup_logging() ran."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
