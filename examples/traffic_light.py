"""Traffic light on an asyncio event loop.

With scheduler=loop.call_soon the loop runs side effects by itself; no
run_side_effects() call is needed (compare turnstile.py).

Demonstrates:
- Enum members as states and plain strings as events
- loop.call_soon as the side-effect scheduler
- Side effects that feed the next event back into the machine

Run: python -m examples.traffic_light
"""

import asyncio
from enum import Enum

from typed_fsm import MachineConfig, StateMachine


class Light(Enum):
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"


CYCLE = {Light.RED: Light.GREEN, Light.GREEN: Light.YELLOW, Light.YELLOW: Light.RED}


async def main(ticks: int = 6) -> None:
    loop = asyncio.get_running_loop()
    done = asyncio.Event()
    count = 0

    def advance() -> None:
        nonlocal count
        count += 1
        if count >= ticks:
            done.set()
        else:
            light.transition("timer")

    def configure(fsm) -> None:
        fsm.initial_state(Light.RED)
        for color, following in CYCLE.items():
            fsm.state(color, lambda s, following=following: s.on(
                "timer", lambda ctx: ctx.transition_to(following, advance)))

    light = StateMachine(configure, scheduler=loop.call_soon, config=MachineConfig(name="light"))
    light.subscribe(lambda prev, cur, ev: print(f"  {cur.value}"))

    light.transition("timer")
    await done.wait()
    print(f"stopped on {light.state.value} after {count} changes")


if __name__ == "__main__":
    asyncio.run(main())
