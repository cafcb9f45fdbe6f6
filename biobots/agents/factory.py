"""Creation of new BioBots and land nodes."""

import math
import random
import time
from typing import Optional

from biobots.agents.components import (
    AgentAttributes,
    AgentState,
    Entity,
    EntityKind,
    Gender,
    LandAttributes,
    Position,
)
from biobots.config import DEFAULT_CONFIG, GameConfig
from biobots.core.events import EventCategory, EventSeverity, EventSink, EventType, NULL_SINK, emit
from biobots.core.identity import new_id

NAMES_MALE = ["X-1", "Kryon", "Zet", "Aron-9", "Vector", "Helix", "Cobalt", "Neon", "Flux", "Titan"]
NAMES_FEMALE = ["Aura", "Nova", "Sila", "Vea-7", "Luma", "Iris", "Echo", "Mirage", "Prisma", "Solaris"]
PERSONALITIES = ["Logical", "Protector", "Curious", "Efficient", "Mystic", "Leader", "Creative", "Guardian"]

MALE_PROBABILITY = 0.7

def _now_ms() -> float:
    return time.time() * 1000

def random_gender(rng: Optional[random.Random] = None) -> Gender:
    """Weighted draw: 70% MALE, 30% FEMALE."""
    rng = rng if rng is not None else random
    return Gender.MALE if rng.random() < MALE_PROBABILITY else Gender.FEMALE

def random_position(
    center: Position,
    radius: float = 200.0,
    rng: Optional[random.Random] = None,
    config: GameConfig = DEFAULT_CONFIG,
) -> Position:
    """Uniform random point in a disc around ``center``, clamped to the world."""
    rng = rng if rng is not None else random
    angle = rng.random() * 2 * math.pi
    r = math.sqrt(rng.random()) * radius
    return Position(
        x=max(0.0, min(config.world_size, center.x + r * math.cos(angle))),
        y=max(0.0, min(config.world_size, center.y + r * math.sin(angle))),
    )

def create_agent_attributes(
    gender: Gender,
    custom_name: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> AgentAttributes:
    """Rolls a fresh set of BioBot attributes.

    Args:
        gender: Picks the name pool.
        custom_name: Used instead of a pooled name when given.
        rng: Random source; the ``random`` module when omitted.
    """
    rng = rng if rng is not None else random
    names = NAMES_MALE if gender is Gender.MALE else NAMES_FEMALE
    name = custom_name or rng.choice(names)
    return AgentAttributes(
        name=name,
        gender=gender,
        age=rng.randint(1, 10),
        energy=100.0,
        state=AgentState.IDLE,
        personality=rng.choice(PERSONALITIES),
        strength=rng.randint(1, 10),
        intelligence=rng.randint(1, 10),
        individual_score=0.0,
    )

def create_agent_entity(
    attributes: AgentAttributes,
    position: Position,
    now: Optional[float] = None,
    sink: EventSink = NULL_SINK,
) -> Entity:
    """Wraps attributes into a new BioBot entity with a fresh id."""
    created_at = now if now is not None else _now_ms()
    entity = Entity(
        id=new_id(),
        kind=EntityKind.AGENT,
        position=Position(position.x, position.y),
        created_at=created_at,
        attributes=attributes,
    )
    emit(sink, EventType.AGENT_CREATED, EventCategory.LIFECYCLE, EventSeverity.INFO, {
        "id": entity.id,
        "name": attributes.name,
        "gender": attributes.gender.value,
        "personality": attributes.personality,
        "position": (entity.position.x, entity.position.y),
    }, timestamp=created_at)
    return entity

def create_land_entity(
    position: Position,
    now: Optional[float] = None,
    sink: EventSink = NULL_SINK,
    config: GameConfig = DEFAULT_CONFIG,
) -> Entity:
    """Creates an empty land node; its decay timer starts immediately."""
    created_at = now if now is not None else _now_ms()
    level = config.initial_resource
    entity = Entity(
        id=new_id(),
        kind=EntityKind.LAND,
        position=Position(position.x, position.y),
        created_at=created_at,
        land_attributes=LandAttributes(
            resource_level=level,
            empty_since=created_at if level <= 0 else None,
        ),
    )
    emit(sink, EventType.LAND_CREATED, EventCategory.ECONOMY, EventSeverity.INFO, {
        "id": entity.id,
        "position": (entity.position.x, entity.position.y),
        "resource_level": level,
    }, timestamp=created_at)
    return entity

def create_wallet_entity(position: Position, now: Optional[float] = None) -> Entity:
    """Creates a stationary marker entity."""
    return Entity(
        id=new_id(),
        kind=EntityKind.WALLET,
        position=Position(position.x, position.y),
        created_at=now if now is not None else _now_ms(),
    )
