"""Scope-guarded configuration surface used while a StateMachine is built."""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator

from typed_fsm.config import MachineConfig
from typed_fsm.types import (
    CONFIG_SCOPE,
    STATE_SCOPE,
    ConfigurationError,
    Discriminant,
    EnterExitCallback,
    Rule,
    ScopeError,
)

_MISSING = object()


@dataclass
class StateRules:
    """Rule table entry for one state.

    ``on`` maps event discriminants to rules. An event with no entry is
    ignored while the machine is in this state.
    """

    on_enter: EnterExitCallback | None = None
    on_exit: EnterExitCallback | None = None
    on: dict[Discriminant, Rule] = field(default_factory=dict)


class ScopeStack:
    """Tags of the configuration callbacks currently running, innermost last."""

    def __init__(self) -> None:
        self._tags: list[str] = []

    @property
    def top(self) -> str | None:
        return self._tags[-1] if self._tags else None

    @contextmanager
    def enter(self, tag: str) -> Iterator[None]:
        self._tags.append(tag)
        try:
            yield
        finally:
            self._tags.pop()

    def check(self, entry_point: str, required: str) -> None:
        """Raise ScopeError unless ``required`` is the innermost open scope."""
        if self.top != required:
            raise ScopeError(entry_point, required)


class StateScope:
    """Entry points handed to a state definition callback.

    Each method returns what it registered, so it can be used as a
    decorator inside the definition callback.
    """

    def __init__(self, stack: ScopeStack, rules: StateRules) -> None:
        self._stack = stack
        self._rules = rules

    def on_enter(self, callback: EnterExitCallback) -> EnterExitCallback:
        self._stack.check("on_enter", STATE_SCOPE)
        self._rules.on_enter = callback
        return callback

    def on_exit(self, callback: EnterExitCallback) -> EnterExitCallback:
        self._stack.check("on_exit", STATE_SCOPE)
        self._rules.on_exit = callback
        return callback

    def on(self, event_type: Discriminant, rule: Rule | None = None) -> Any:
        """Register ``rule`` for events tagged ``event_type``.

        Later registrations for the same tag replace earlier ones. Without
        ``rule``, returns a decorator that registers the decorated function.
        """
        self._stack.check("on", STATE_SCOPE)
        if rule is None:
            def register(fn: Rule) -> Rule:
                return self.on(event_type, fn)

            return register
        self._rules.on[event_type] = rule
        return rule


class ConfigScope:
    """Entry points handed to the top-level configuration callback."""

    def __init__(self, stack: ScopeStack, config: MachineConfig) -> None:
        self._stack = stack
        self._config = config
        self._initial: Any = _MISSING
        self._table: dict[Discriminant, StateRules] = {}

    def initial_state(self, state: Any) -> None:
        """Record the state the machine starts in. Last call wins unless strict."""
        self._stack.check("initial_state", CONFIG_SCOPE)
        if self._initial is not _MISSING and self._config.strict_initial_state:
            raise ConfigurationError(
                f"Initial state already set to {self._initial!r}"
            )
        self._initial = state

    def state(
        self,
        state_type: Discriminant,
        define: Callable[[StateScope], None] | None = None,
    ) -> Any:
        """Define the rules for states tagged ``state_type``.

        ``define`` runs immediately with a StateScope. Redefining a tag
        replaces the earlier definition. Without ``define``, returns a
        decorator.
        """
        self._stack.check("state", CONFIG_SCOPE)
        if define is None:
            def register(fn: Callable[[StateScope], None]) -> Callable[[StateScope], None]:
                self.state(state_type, fn)
                return fn

            return register
        rules = StateRules()
        with self._stack.enter(STATE_SCOPE):
            define(StateScope(self._stack, rules))
        self._table[state_type] = rules
        return define


def build(
    configure: Any, config: MachineConfig
) -> tuple[Any, dict[Discriminant, StateRules]]:
    """Run ``configure`` once and return ``(initial_state, rule_table)``.

    Raises ConfigurationError if ``configure`` is not callable or left the
    initial state or the state definitions out.
    """
    if not callable(configure):
        raise ConfigurationError(
            "The StateMachine constructor expects a callback as the first argument"
        )
    stack = ScopeStack()
    scope = ConfigScope(stack, config)
    with stack.enter(CONFIG_SCOPE):
        configure(scope)

    if scope._initial is _MISSING:
        raise ConfigurationError("No initial state provided")
    if not scope._table:
        raise ConfigurationError("No state definition was provided")
    return scope._initial, scope._table
