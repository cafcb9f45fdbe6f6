"""One tick of the whole world."""

import logging
import random
import time
from typing import List, Optional, Sequence

from biobots.agents.components import Entity
from biobots.config import DEFAULT_CONFIG, GameConfig
from biobots.core.behavior import lands_of, process_biobot
from biobots.core.events import EventSink, NULL_SINK
from biobots.core.lifecycle import process_death_lifecycle, process_land_decay

logger = logging.getLogger(__name__)

def advance_world(
    entities: Sequence[Entity],
    speed: float,
    interaction_radius: float,
    now: Optional[float] = None,
    config: GameConfig = DEFAULT_CONFIG,
    sink: EventSink = NULL_SINK,
    rng: Optional[random.Random] = None,
) -> List[Entity]:
    """Computes the next world snapshot.

    Every entity is copied first, so nothing reachable from ``entities`` is
    modified. Land nodes run their decay timer, BioBots run the death
    lifecycle and then their behavior against this tick's land nodes. Other
    kinds pass through unchanged.

    Args:
        entities: The current snapshot.
        speed: BioBot movement per tick.
        interaction_radius: Passed through to the behavior processor.
        now: Timestamp in ms. Defaults to the wall clock.
        config: Simulation constants.
        sink: Game event sink.
        rng: Random source for the behavior processor.

    Returns:
        The surviving entities, in their original order.
    """
    if now is None:
        now = time.time() * 1000

    next_entities = [entity.copy() for entity in entities]
    lands = lands_of(next_entities)

    result: List[Entity] = []
    for entity in next_entities:
        if entity.is_land:
            if not process_land_decay(entity, now, config=config, sink=sink):
                result.append(entity)
            continue

        if entity.is_agent and entity.attributes is not None:
            if process_death_lifecycle(entity, entity.attributes, now, config=config, sink=sink):
                logger.debug("Removing faded BioBot %s", entity.id)
                continue
            result.append(process_biobot(
                entity, lands, now, speed, interaction_radius,
                config=config, sink=sink, rng=rng,
            ))
            continue

        result.append(entity)

    return result
