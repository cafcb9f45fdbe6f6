"""BioBot behavior: energy, state resolution and movement for one tick."""

import math
import random
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

import numpy as np

from biobots.agents.components import AgentAttributes, AgentState, Entity, Position
from biobots.config import DEFAULT_CONFIG, GameConfig
from biobots.core.events import EventCategory, EventSeverity, EventSink, EventType, NULL_SINK, emit
from biobots.core.identity import entity_seed
from biobots.world.scoring import score_rate

WORK_APPROACH_MARGIN = 50.0 # Orbit once within interaction_radius + this
WORK_ORBIT_RADIUS = 40.0
FEED_JITTER = 10.0
WANDER_AMPLITUDE = 100.0
WANDER_TIME_SCALE = 0.0005
ARRIVAL_DISTANCE = 1.0

def find_nearest_land(position: Position, lands: Sequence[Entity]) -> Tuple[Optional[Entity], float]:
    """Returns the closest land node and its straight-line distance.

    Ties go to the node that comes first in ``lands``. With no lands the
    result is ``(None, inf)``.
    """
    if not lands:
        return None, math.inf
    coords = np.array([(land.position.x, land.position.y) for land in lands], dtype=np.float64)
    distances = np.hypot(coords[:, 0] - position.x, coords[:, 1] - position.y)
    index = int(np.argmin(distances)) # First occurrence on ties
    return lands[index], float(distances[index])

def _energy_decay(state: AgentState, config: GameConfig) -> float:
    if state is AgentState.WORKING:
        return config.energy_decay_work
    if state is AgentState.WALKING:
        return config.energy_decay_move
    return config.energy_decay_idle

def _land_level(land: Optional[Entity]) -> float:
    if land is None or land.land_attributes is None:
        return 0.0
    return land.land_attributes.resource_level

def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))

def _resolve_state(
    attrs: AgentAttributes,
    state: AgentState,
    nearest: Optional[Entity],
    is_hungry: bool,
    has_resources: bool,
    in_feeding_range: bool,
    config: GameConfig,
) -> AgentState:
    """Applies the feeding and working rules. Mutates energy, score and the node."""
    if state is AgentState.WORKING:
        if nearest is None or (nearest.land_attributes is not None and nearest.land_attributes.resource_level == 0):
            state = AgentState.IDLE

    if is_hungry and has_resources and in_feeding_range:
        state = AgentState.FEEDING
        attrs.energy = min(config.max_energy, attrs.energy + config.energy_recharge_rate)
        land_attrs = nearest.land_attributes
        land_attrs.resource_level = max(0.0, land_attrs.resource_level - config.consumption_rate)
    elif state is AgentState.WORKING and nearest is not None:
        level = _land_level(nearest)
        if level > 0:
            attrs.individual_score += score_rate(level, config)
    elif state is AgentState.FEEDING and (not is_hungry or not has_resources):
        state = AgentState.IDLE

    return state

def _movement_target(
    entity: Entity,
    state: AgentState,
    nearest: Optional[Entity],
    distance: float,
    is_hungry: bool,
    has_resources: bool,
    now: float,
    interaction_radius: float,
    rng,
) -> Tuple[float, float]:
    """Picks where to head this tick.

    ``is_hungry`` and ``has_resources`` describe the agent before this
    tick's bite, so the last bite of a meal still heads for the node.
    """
    if state is AgentState.WORKING and nearest is not None and has_resources:
        if distance < interaction_radius + WORK_APPROACH_MARGIN:
            phase = now / 1000 + entity_seed(entity.id)
            return (
                nearest.position.x + math.cos(phase) * WORK_ORBIT_RADIUS,
                nearest.position.y + math.sin(phase) * WORK_ORBIT_RADIUS,
            )
        return nearest.position.x, nearest.position.y

    if is_hungry and has_resources and nearest is not None:
        return (
            nearest.position.x + (rng.random() - 0.5) * 2 * FEED_JITTER,
            nearest.position.y + (rng.random() - 0.5) * 2 * FEED_JITTER,
        )

    # Wander around the current position
    t = now * WANDER_TIME_SCALE
    seed = entity_seed(entity.id)
    return (
        entity.position.x + math.cos(t + seed) * WANDER_AMPLITUDE,
        entity.position.y + math.sin(t + seed * 2) * WANDER_AMPLITUDE,
    )

def process_biobot(
    entity: Entity,
    lands: Sequence[Entity],
    now: float,
    speed: float,
    interaction_radius: float,
    config: GameConfig = DEFAULT_CONFIG,
    sink: EventSink = NULL_SINK,
    rng: Optional[random.Random] = None,
) -> Entity:
    """Advances one BioBot by a single tick.

    The attribute record of ``entity`` and the land record of the nearest
    node are mutated in place; callers supply per-tick copies. The returned
    entity is a new wrapper carrying the updated position.

    Args:
        entity: The BioBot to advance.
        lands: Land nodes visible this tick, in scan order.
        now: Current timestamp in ms.
        speed: Distance moved per tick.
        interaction_radius: Base radius used to decide when to orbit a work node.
        config: Simulation constants.
        sink: Receives a STATE_CHANGED event when the state changes.
        rng: Random source for the approach jitter.

    Returns:
        The updated entity, or ``entity`` itself when it is dead or has no
        attribute record.
    """
    attrs = entity.attributes
    if attrs is None or attrs.state is AgentState.DEAD:
        return entity
    rng = rng if rng is not None else random

    previous_state = attrs.state
    state = previous_state

    attrs.energy = max(0.0, attrs.energy - _energy_decay(state, config))

    if state is AgentState.WORKING and attrs.work_end_time is not None and now > attrs.work_end_time:
        state = AgentState.IDLE
        attrs.work_end_time = None

    nearest, distance = find_nearest_land(entity.position, lands)
    is_hungry = attrs.energy < config.hunger_threshold
    has_resources = _land_level(nearest) > 0
    in_feeding_range = nearest is not None and distance < config.feeding_radius

    state = _resolve_state(attrs, state, nearest, is_hungry, has_resources, in_feeding_range, config)
    if state is not AgentState.WORKING:
        attrs.work_end_time = None
    attrs.state = state

    if state is not previous_state:
        emit(sink, EventType.STATE_CHANGED, EventCategory.BEHAVIOR, EventSeverity.INFO, {
            "id": entity.id,
            "name": attrs.name,
            "from": previous_state.value,
            "to": state.value,
            "energy": round(attrs.energy, 2),
        }, timestamp=now)

    target_x, target_y = _movement_target(
        entity, state, nearest, distance, is_hungry, has_resources, now, interaction_radius, rng,
    )
    low = config.wander_margin
    high = config.world_size - config.wander_margin
    target_x = _clamp(target_x, low, high)
    target_y = _clamp(target_y, low, high)

    x, y = entity.position.x, entity.position.y
    dx = target_x - x
    dy = target_y - y
    dist = math.hypot(dx, dy)
    if dist > ARRIVAL_DISTANCE:
        move_speed = speed * config.feeding_speed_factor if state is AgentState.FEEDING else speed
        step = min(move_speed, dist)
        x += dx / dist * step
        y += dy / dist * step

    new_position = Position(
        x=_clamp(x, 0.0, config.world_size),
        y=_clamp(y, 0.0, config.world_size),
    )
    return replace(entity, position=new_position, attributes=attrs)

def lands_of(entities: Sequence[Entity]) -> List[Entity]:
    """Land nodes among ``entities``, in order."""
    return [e for e in entities if e.is_land]
