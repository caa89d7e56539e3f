"""typed-fsm - Event-driven finite state machines built from scoped callbacks."""
from __future__ import annotations

from typed_fsm.builder import ConfigScope, StateScope
from typed_fsm.config import MachineConfig
from typed_fsm.deferred import DeferredQueue
from typed_fsm.machine import StateMachine
from typed_fsm.types import (
    ConfigurationError,
    RuleContext,
    ScopeError,
    Transition,
    discriminant,
)

__all__ = [
    "StateMachine",
    "MachineConfig",
    "DeferredQueue",
    "ConfigScope",
    "StateScope",
    "RuleContext",
    "Transition",
    "ConfigurationError",
    "ScopeError",
    "discriminant",
]
