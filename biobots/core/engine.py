import logging
import time
from typing import Callable, Optional

import pyglet

from biobots.config import GameConfig
from biobots.core.systems import TickListener, WorldUpdateSystem, wall_clock_ms
from biobots.world.world import BioBotWorld

logger = logging.getLogger(__name__)

class TickDriver:
    """Schedules one world update per frame on a pyglet clock.

    Frames are delivered while the driver is active. A paused driver still
    receives frames but skips the world update. Each update runs to
    completion before the clock regains control, so ticks never overlap.

    Args:
        world: The world to advance.
        config: Frame rate and fixed step; the world's config when omitted.
        clock: Clock to schedule on; pyglet's default clock when omitted.
        time_source: Returns the current time in ms for each tick.
    """

    def __init__(
        self,
        world: BioBotWorld,
        config: Optional[GameConfig] = None,
        clock: Optional[pyglet.clock.Clock] = None,
        time_source: Callable[[], float] = wall_clock_ms,
    ) -> None:
        self.world = world
        self.config = config if config is not None else world.config
        self.clock = clock if clock is not None else pyglet.clock.get_default()
        self.interval = 1.0 / self.config.target_fps
        self.system = WorldUpdateSystem(world, time_source=time_source, fixed_step_ms=self.config.fixed_step_ms)

        self.active = False
        self.paused = False
        self.closed = False
        self._scheduled = False
        self.frame_count = 0
        self.ticks_processed = 0

    def add_listener(self, listener: TickListener) -> None:
        """Registers a consumer of each new snapshot."""
        self.system.add_listener(listener)

    def start(self) -> None:
        if self.closed:
            raise RuntimeError("TickDriver has been closed.")
        self.active = True
        if not self._scheduled:
            self.clock.schedule_interval(self._on_frame, self.interval)
            self._scheduled = True
            logger.info("Tick driver started at %.1f FPS", self.config.target_fps)

    def stop(self) -> None:
        self.active = False
        if self._scheduled:
            self.clock.unschedule(self._on_frame)
            self._scheduled = False
            logger.info("Tick driver stopped after %d ticks", self.ticks_processed)

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def toggle_pause(self) -> bool:
        self.paused = not self.paused
        return self.paused

    def close(self) -> None:
        """Stops scheduling and drops listeners. Safe to call twice."""
        if self.closed:
            return
        self.stop()
        self.system.listeners.clear()
        self.closed = True

    def _on_frame(self, dt: float) -> None:
        if not self.active:
            return
        self.frame_count += 1
        if self.paused:
            return
        self.system.process(dt)
        self.ticks_processed += 1

    def run_headless(self, frames: int, realtime: bool = False) -> int:
        """Delivers ``frames`` frames without a window.

        With ``realtime`` the loop sleeps to hold the target frame rate, like
        a display would; otherwise frames are delivered back to back.

        Returns:
            The number of ticks actually processed (paused frames excluded).
        """
        if not self.active:
            self.start()
        before = self.ticks_processed
        last_time = time.perf_counter()
        for _ in range(frames):
            if not self.active:
                break
            current_time = time.perf_counter()
            dt = current_time - last_time if realtime else self.interval
            last_time = current_time
            self._on_frame(dt)
            if realtime:
                time_to_sleep = self.interval - (time.perf_counter() - current_time)
                if time_to_sleep > 0:
                    time.sleep(time_to_sleep)
        return self.ticks_processed - before
