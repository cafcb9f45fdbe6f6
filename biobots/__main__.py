"""Main entry point for BioBots.

Runs a short headless session and prints a summary of the world.
"""

import logging
import random
import sys

from biobots.agents.components import Position
from biobots.agents.factory import create_wallet_entity, random_position
from biobots.config import GameConfig
from biobots.core.engine import TickDriver
from biobots.core.events import LoggingEventSink
from biobots.world.world import BioBotWorld

DEFAULT_FRAMES = 600 # 10 simulated seconds at 60 FPS

def main(frames: int = DEFAULT_FRAMES) -> None:
    """Seeds a small world, runs it headless and reports the outcome."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    print("Initializing BioBots world...")
    config = GameConfig(fixed_step_ms=1000.0 / 60.0, initial_points=100.0)
    rng = random.Random(42)
    world = BioBotWorld(config, sink=LoggingEventSink(), rng=rng)

    center = Position(config.world_size / 2, config.world_size / 2)
    world.add_entity(create_wallet_entity(center))
    land = world.spawn_land(random_position(center, 150, rng=rng, config=config))
    world.water_land(land.id)
    world.water_land(land.id)
    for _ in range(3):
        world.spawn_agent(random_position(land.position, 60, rng=rng, config=config))
    world.assign_work()

    driver = TickDriver(world)
    print(f"Running {frames} frames headless...")
    ticks = driver.run_headless(frames)
    driver.close()

    stats = world.stats()
    print(f"Processed {ticks} ticks.")
    print(f"Global score: {stats.global_score:.2f}  Average energy: {stats.average_energy:.2f}")
    print(f"BioBots alive: {stats.living_agents}  dead: {stats.dead_agents}  Lands: {stats.lands}")
    print(f"Mana left: {world.player.points:g}  Unspent score: {world.available_score:.2f}  Level: {world.level}")

if __name__ == "__main__":
    main(int(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_FRAMES)
