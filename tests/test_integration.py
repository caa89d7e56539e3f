"""Integration tests: a coin-operated turnstile driven end to end."""
import asyncio
from dataclasses import dataclass

import pytest

from typed_fsm import MachineConfig, StateMachine

FARE = 50


@dataclass(frozen=True)
class Locked:
    credit: int = 0


@dataclass(frozen=True)
class Unlocked:
    pass


@dataclass(frozen=True)
class InsertCoin:
    value: int


@dataclass(frozen=True)
class Push:
    pass


def make_turnstile(door_log, **kwargs):
    def locked(s):
        def insert_coin(ctx):
            credit = ctx.state.credit + ctx.event.value
            if credit >= FARE:
                return ctx.transition_to(Unlocked(), lambda: door_log.append("open"))
            return ctx.transition_to(Locked(credit=credit))

        s.on(InsertCoin, insert_coin)
        s.on(Push, lambda ctx: ctx.dont_transition())

    def unlocked(s):
        s.on(Push, lambda ctx: ctx.transition_to(Locked(), lambda: door_log.append("close")))
        # Extra coins are swallowed.
        s.on(InsertCoin, lambda ctx: ctx.dont_transition())

    def configure(fsm):
        fsm.initial_state(Locked(credit=0))
        fsm.state(Locked, locked)
        fsm.state(Unlocked, unlocked)

    return StateMachine(configure, config=MachineConfig(name="turnstile"), **kwargs)


class TestTurnstile:
    """Turnstile scenarios."""

    def test_exact_fare_unlocks_and_opens_door(self):
        """locked(0) + insertCoin(50) -> unlocked, door opening scheduled."""
        # Arrange
        door = []
        turnstile = make_turnstile(door)

        # Act
        turnstile.transition(InsertCoin(value=50))

        # Assert
        assert turnstile.state == Unlocked()
        assert door == []
        assert turnstile.run_side_effects() == 1
        assert door == ["open"]

    def test_partial_coin_accumulates_credit(self):
        """locked(0) + insertCoin(10) -> locked(10), no side effect."""
        # Arrange
        door = []
        turnstile = make_turnstile(door)

        # Act
        turnstile.transition(InsertCoin(value=10))

        # Assert
        assert turnstile.state == Locked(credit=10)
        assert turnstile.run_side_effects() == 0
        assert door == []

    def test_full_cycle_with_observer(self):
        """Coins, passage and relock, with every change observed."""
        # Arrange
        door = []
        history = []
        turnstile = make_turnstile(door)
        turnstile.subscribe(lambda prev, cur, ev: history.append((prev, cur, ev)))

        # Act
        turnstile.transition(Push())
        turnstile.transition(InsertCoin(value=20))
        turnstile.transition(InsertCoin(value=30))
        turnstile.transition(InsertCoin(value=5))
        turnstile.transition(Push())
        turnstile.run_side_effects()

        # Assert
        assert turnstile.state == Locked(credit=0)
        assert door == ["open", "close"]
        assert history == [
            (None, Locked(0), None),
            (Locked(0), Locked(0), Push()),
            (Locked(0), Locked(20), InsertCoin(20)),
            (Locked(20), Unlocked(), InsertCoin(30)),
            (Unlocked(), Unlocked(), InsertCoin(5)),
            (Unlocked(), Locked(0), Push()),
        ]


def test_event_loop_scheduler():
    """loop.call_soon works as a scheduler: effects run once control returns to the loop."""
    door = []

    async def main():
        loop = asyncio.get_running_loop()
        turnstile = make_turnstile(door, scheduler=loop.call_soon)

        turnstile.transition(InsertCoin(value=50))
        turnstile.transition(Push())
        assert door == []

        await asyncio.sleep(0)
        assert door == ["open", "close"]

        with pytest.raises(RuntimeError):
            turnstile.run_side_effects()

    asyncio.run(main())
