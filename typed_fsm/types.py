"""Shared type aliases, value objects and errors for typed-fsm."""
from __future__ import annotations

from collections.abc import Hashable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, TypeVar

S = TypeVar("S")
E = TypeVar("E")

Discriminant = Hashable
SideEffect = Callable[[], None]
# Anything that runs a zero-argument callable later, e.g. loop.call_soon.
Scheduler = Callable[[SideEffect], Any]
EnterExitCallback = Callable[[Any], None]
Listener = Callable[[Any, Any, Any], None]
Rule = Callable[["RuleContext[Any, Any]"], "Transition[Any]"]

_ATOMS = (type, str, bytes, int, float, complex, tuple, frozenset, Enum)

CONFIG_SCOPE = "config"
STATE_SCOPE = "state"

_SCOPE_DESCRIPTIONS = {
    CONFIG_SCOPE: "the config callback, but not inside a state callback",
    STATE_SCOPE: "a state callback",
}


def discriminant(value: Any) -> Discriminant:
    """Return the tag a state or event is dispatched on.

    Classes and atoms (strings, numbers, tuples, enum members, ...) are
    their own tag. Mappings use their ``"type"`` key and objects their
    ``type`` attribute. Other values are keyed by their class, so one
    frozen dataclass per variant works without a tag field.
    """
    if isinstance(value, _ATOMS):
        return value
    if isinstance(value, Mapping):
        return value["type"]
    tag = getattr(value, "type", None)
    if tag is not None:
        return tag
    return type(value)


@dataclass(frozen=True, slots=True)
class Transition(Generic[S]):
    """Outcome of a rule. ``next_state`` of None means stay in place."""

    next_state: S | None = None
    side_effect: SideEffect | None = None


@dataclass(frozen=True, slots=True)
class RuleContext(Generic[S, E]):
    """Argument handed to a rule: the current state, the event, and the
    two constructors for the rule's return value."""

    state: S
    event: E

    def transition_to(
        self, next_state: S, side_effect: SideEffect | None = None
    ) -> Transition[S]:
        return Transition(next_state, side_effect)

    def dont_transition(self, side_effect: SideEffect | None = None) -> Transition[S]:
        return Transition(None, side_effect)


class ConfigurationError(Exception):
    """Raised when a machine is constructed from an incomplete configuration."""


class ScopeError(Exception):
    """Raised when a configuration entry point is called outside its scope."""

    def __init__(self, entry_point: str, required_scope: str) -> None:
        self.entry_point = entry_point
        self.required_scope = required_scope
        super().__init__(
            f"Call to `{entry_point}` is allowed only from within "
            f"{_SCOPE_DESCRIPTIONS[required_scope]}"
        )
