import time
from typing import Callable, List, Optional

import esper

from biobots.agents.components import Entity
from biobots.world.world import BioBotWorld

TickListener = Callable[[List[Entity]], None]

def wall_clock_ms() -> float:
    return time.time() * 1000

class System(esper.Processor):
    """Base class for all systems driven by the tick driver."""

    def __init__(self) -> None:
        super().__init__()

class WorldUpdateSystem(System):
    """Advances a BioBotWorld once per processed frame and publishes the result.

    Args:
        world: Owner of the entity snapshot.
        time_source: Returns the current time in ms.
        fixed_step_ms: When set, simulated time starts at the first frame's
            ``time_source()`` and advances by exactly this much per frame.
    """

    def __init__(
        self,
        world: BioBotWorld,
        time_source: Callable[[], float] = wall_clock_ms,
        fixed_step_ms: Optional[float] = None,
    ) -> None:
        super().__init__()
        self.world = world
        self.time_source = time_source
        self.fixed_step_ms = fixed_step_ms
        self.sim_time: Optional[float] = None
        self.listeners: List[TickListener] = []

    def add_listener(self, listener: TickListener) -> None:
        self.listeners.append(listener)

    def remove_listener(self, listener: TickListener) -> None:
        if listener in self.listeners:
            self.listeners.remove(listener)

    def next_timestamp(self) -> float:
        if self.fixed_step_ms is None:
            return self.time_source()
        if self.sim_time is None:
            self.sim_time = self.time_source()
        else:
            self.sim_time += self.fixed_step_ms
        return self.sim_time

    def process(self, dt: float) -> None:
        entities = self.world.tick(now=self.next_timestamp())
        for listener in list(self.listeners):
            listener(entities)
