"""StateMachine - event dispatch over a rule table built at construction."""
from __future__ import annotations

import logging
from typing import Callable, Generic

from typed_fsm.builder import ConfigScope, StateRules, build
from typed_fsm.config import MachineConfig
from typed_fsm.deferred import DeferredQueue
from typed_fsm.observers import ObserverRegistry
from typed_fsm.types import (
    E,
    Listener,
    RuleContext,
    S,
    Scheduler,
    discriminant,
)

logger = logging.getLogger(__name__)


class StateMachine(Generic[S, E]):
    """Finite state machine with a single current state.

    ``configure(scope)`` runs once, inside the constructor::

        def configure(fsm):
            fsm.initial_state(Locked(credit=0))

            def locked(s):
                s.on(InsertCoin, lambda ctx: ctx.transition_to(Unlocked()))

            fsm.state(Locked, locked)

        turnstile = StateMachine(configure)
        turnstile.transition(InsertCoin(value=50))

    Side effects returned by rules go to ``scheduler`` and never run inside
    ``transition``.

    IMPORTANT: without a ``scheduler`` the machine only queues side
    effects. They do not run until the host calls ``run_side_effects()``,
    typically right after each ``transition``. Pass
    ``scheduler=loop.call_soon`` to have an asyncio event loop run them.

    Not thread-safe: confine a machine to one thread or lock around it.
    """

    def __init__(
        self,
        configure: Callable[[ConfigScope], None] | None = None,
        *,
        scheduler: Scheduler | None = None,
        config: MachineConfig | None = None,
    ) -> None:
        self.config: MachineConfig = config if config is not None else MachineConfig()
        initial, self._rules = build(configure, self.config)
        self._state: S = initial
        self._observers = ObserverRegistry()

        self._effects: DeferredQueue | None = None
        if scheduler is None:
            self._effects = DeferredQueue()
            scheduler = self._effects.schedule
        self._schedule: Scheduler = scheduler

        logger.debug(
            "%s: configured %d states, initial state %r",
            self.config.name, len(self._rules), initial,
        )
        self._enter(initial)

    @property
    def state(self) -> S:
        return self._state

    def transition(self, event: E) -> None:
        """Dispatch ``event`` to the rule for the current state.

        Events with no matching rule are ignored. Exceptions raised by user
        callbacks propagate; a failing rule leaves the state untouched.
        """
        rules = self._rules.get(discriminant(self._state))
        if rules is None:
            logger.debug("%s: no rules for state %r, ignoring %r", self.config.name, self._state, event)
            return
        rule = rules.on.get(discriminant(event))
        if rule is None:
            logger.debug("%s: %r does not handle %r", self.config.name, self._state, event)
            return

        outcome = rule(RuleContext(self._state, event))

        previous = self._state
        current = previous
        if outcome.next_state is not None:
            if rules.on_exit is not None:
                rules.on_exit(previous)
            current = outcome.next_state
            self._state = current
            self._enter(current)
            logger.debug("%s: %r -> %r on %r", self.config.name, previous, current, event)

        self._observers.notify(previous, current, event)

        if outcome.side_effect is not None:
            self._schedule(outcome.side_effect)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener(previous, current, event)`` and call it once now.

        The immediate call receives ``(None, state, None)``; if it raises, the
        listener is not kept. Returns a function that removes this registration.
        """
        token = self._observers.add(listener)
        try:
            listener(None, self._state, None)
        except Exception:
            self._observers.remove(token)
            raise

        def unsubscribe() -> None:
            self._observers.remove(token)

        return unsubscribe

    def run_side_effects(self) -> int:
        """Run the side effects queued by earlier transitions.

        Only available when the machine was built without ``scheduler``.
        Returns the number run.
        """
        if self._effects is None:
            raise RuntimeError(
                f"{self.config.name}: side effects are handed to a custom scheduler"
            )
        return self._effects.flush()

    def _enter(self, state: S) -> None:
        rules: StateRules | None = self._rules.get(discriminant(state))
        if rules is not None and rules.on_enter is not None:
            rules.on_enter(state)
