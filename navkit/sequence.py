"""Scripted multi-step navigation sequences with cooperative waits.

A sequence is a list of steps, each either a mutation or a wait. It runs as a
small state machine::

    IDLE -> RUNNING -> AWAITING_STEP(n) -> RUNNING -> ... -> FINISHED
                              |
                              +-> CANCELLED  (owner scope closed)

Waits are scheduled on a ``Clock`` and never block. Every sequence can be bound
to a ``LifetimeScope``; once the scope closes, no further step runs.
"""
from __future__ import annotations

import asyncio
import enum
import logging
import weakref
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from .clock import Clock, TimerHandle
from .errors import SequenceStateError

logger = logging.getLogger(__name__)


class SequenceState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    AWAITING_STEP = "awaiting_step"
    FINISHED = "finished"
    CANCELLED = "cancelled"
    FAILED = "failed"


TERMINAL_STATES = frozenset({SequenceState.FINISHED, SequenceState.CANCELLED, SequenceState.FAILED})


@dataclass(frozen=True)
class Step:
    """One step of a script: a labelled mutation or a wait."""

    label: str
    action: Callable[[], Any] | None = None
    delay: float = 0.0

    @classmethod
    def mutate(cls, label: str, action: Callable[[], Any]) -> Step:
        return cls(label=label, action=action)

    @classmethod
    def wait(cls, seconds: float) -> Step:
        if seconds < 0:
            raise ValueError("wait duration must be >= 0")
        return cls(label=f"wait {seconds:g}s", delay=seconds)

    @property
    def is_wait(self) -> bool:
        return self.action is None


class LifetimeScope:
    """Ties scripted sequences to the lifetime of an owner.

    Closing the scope cancels every sequence still running in it. A scope bound
    to an owner object closes by itself when that owner is garbage collected.
    """

    def __init__(self, name: str = "scope"):
        self.name = name
        self._closed = False
        self._members: list[ScriptedSequence | LifetimeScope] = []
        self._parent: LifetimeScope | None = None
        self._finalizer: weakref.finalize | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def members(self) -> tuple[ScriptedSequence | LifetimeScope, ...]:
        """Sequences and child scopes still open in this scope."""
        return tuple(self._members)

    def bind_owner(self, owner: object) -> LifetimeScope:
        """Close this scope when ``owner`` is collected."""
        self._finalizer = weakref.finalize(owner, self.close)
        return self

    def child(self, name: str) -> LifetimeScope:
        """Create a nested scope closed together with this one.

        A child that closes first removes itself from this scope.
        """
        scope = LifetimeScope(name)
        if self._closed:
            scope.close()
        else:
            scope._parent = self
            self._members.append(scope)
        return scope

    def adopt(self, sequence: ScriptedSequence) -> None:
        self._members.append(sequence)

    def discard(self, member: ScriptedSequence | LifetimeScope) -> None:
        if member in self._members:
            self._members.remove(member)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        logger.debug("Closing scope %s (%d members)", self.name, len(self._members))
        members, self._members = self._members, []
        for member in members:
            if isinstance(member, LifetimeScope):
                member.close()
            else:
                member.cancel()
        if self._finalizer is not None:
            self._finalizer.detach()
        if self._parent is not None:
            self._parent.discard(self)
            self._parent = None

    def __repr__(self) -> str:
        return f"LifetimeScope({self.name!r}, closed={self._closed})"


class ScriptedSequence:
    """Runs steps in order, suspending on waits.

    The next step of a sequence always sees the state exactly as its previous
    step left it; other work may run during a wait.
    """

    def __init__(
        self,
        steps: Iterable[Step],
        clock: Clock,
        scope: LifetimeScope | None = None,
        name: str = "sequence",
    ):
        self.steps: tuple[Step, ...] = tuple(steps)
        self.name = name
        self._clock = clock
        self._scope = scope
        self._index = 0
        self._handle: TimerHandle | None = None
        self._done_callbacks: list[Callable[[ScriptedSequence], Any]] = []
        self.state = SequenceState.IDLE
        self.executed: list[str] = []

    @property
    def done(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def awaiting_step(self) -> int | None:
        """Index of the step that runs once the current wait ends."""
        if self.state is SequenceState.AWAITING_STEP:
            return self._index
        return None

    def add_done_callback(self, callback: Callable[[ScriptedSequence], Any]) -> None:
        if self.done:
            callback(self)
        else:
            self._done_callbacks.append(callback)

    def start(self) -> ScriptedSequence:
        if self.state is not SequenceState.IDLE:
            raise SequenceStateError(f"{self.name} already {self.state.value}")
        if self._scope is not None:
            if self._scope.closed:
                logger.info("%s not started: scope %s is closed", self.name, self._scope.name)
                self._settle(SequenceState.CANCELLED)
                return self
            self._scope.adopt(self)
        logger.info("Starting %s (%d steps)", self.name, len(self.steps))
        self._run()
        return self

    def cancel(self) -> None:
        """Stop before the next step. Harmless on a finished sequence."""
        if self.done:
            return
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        logger.info("Cancelled %s before step %d", self.name, self._index)
        self._settle(SequenceState.CANCELLED)

    async def wait(self) -> SequenceState:
        """Wait on the running event loop until the sequence settles."""
        if self.done:
            return self.state
        future: asyncio.Future = asyncio.get_running_loop().create_future()

        def _resolve(seq: ScriptedSequence) -> None:
            if not future.done():
                future.set_result(seq.state)

        self.add_done_callback(_resolve)
        return await future

    def _run(self) -> None:
        self.state = SequenceState.RUNNING
        while self._index < len(self.steps):
            if self._scope is not None and self._scope.closed:
                self.cancel()
                return
            step = self.steps[self._index]
            self._index += 1
            if step.is_wait:
                self.state = SequenceState.AWAITING_STEP
                logger.debug("%s: %s", self.name, step.label)
                self._handle = self._clock.call_later(step.delay, self._resume)
                return
            logger.debug("%s: step %d %s", self.name, self._index - 1, step.label)
            try:
                step.action()
            except Exception:
                logger.exception("%s: step %r failed", self.name, step.label)
                self._settle(SequenceState.FAILED)
                raise
            self.executed.append(step.label)
        self._settle(SequenceState.FINISHED)

    def _resume(self) -> None:
        self._handle = None
        if self.state is not SequenceState.AWAITING_STEP:
            return
        self._run()

    def _settle(self, state: SequenceState) -> None:
        self.state = state
        if self._scope is not None:
            self._scope.discard(self)
        if state is SequenceState.FINISHED:
            logger.info("%s finished", self.name)
        callbacks, self._done_callbacks = self._done_callbacks, []
        for callback in callbacks:
            callback(self)

    def __repr__(self) -> str:
        return f"ScriptedSequence({self.name!r}, state={self.state.value}, next={self._index})"
