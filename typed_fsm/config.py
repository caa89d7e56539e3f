"""Machine configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MachineConfig:
    """Immutable settings for a StateMachine.

    Attributes:
        name: Label used in log records emitted by the machine.
        strict_initial_state: Raise ConfigurationError when ``initial_state``
            is called more than once instead of keeping the last value.
    """

    name: str = "fsm"
    strict_initial_state: bool = False
