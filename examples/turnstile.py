"""Coin-operated turnstile -- the classic two-state machine.

Side effects are only queued by transition(). Without a scheduler they run
when you call run_side_effects(), as main() does after every dispatch;
see traffic_light.py for handing them to an asyncio loop instead.

Demonstrates:
- Dataclass variants as states and events, dispatched by class
- Rules that accumulate payload (credit) without changing variant
- Side effects queued by transitions and run afterwards
- Observing every dispatch with subscribe()

Run: python -m examples.turnstile
"""

from dataclasses import dataclass

from typed_fsm import MachineConfig, StateMachine

FARE = 50


# ---------------------------------------------------------------------------
# States and events
# ---------------------------------------------------------------------------

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


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

def configure(fsm) -> None:
    fsm.initial_state(Locked())

    @fsm.state(Locked)
    def locked(s):
        @s.on(InsertCoin)
        def insert_coin(ctx):
            credit = ctx.state.credit + ctx.event.value
            if credit < FARE:
                return ctx.transition_to(Locked(credit))
            return ctx.transition_to(Unlocked(), lambda: print("  * door opens"))

    @fsm.state(Unlocked)
    def unlocked(s):
        s.on_enter(lambda state: print("  * green light on"))
        s.on_exit(lambda state: print("  * green light off"))
        s.on(Push, lambda ctx: ctx.transition_to(Locked(), lambda: print("  * door closes")))


def main() -> None:
    turnstile = StateMachine(configure, config=MachineConfig(name="turnstile"))
    turnstile.subscribe(
        lambda prev, cur, ev: print(f"  {prev} --{ev}--> {cur}")
    )

    for event in (Push(), InsertCoin(20), InsertCoin(40), Push()):
        print(f"dispatch {event}")
        turnstile.transition(event)
        turnstile.run_side_effects()

    print(f"final state: {turnstile.state}")


if __name__ == "__main__":
    main()
