import random
from typing import Optional

import pytest

from biobots.agents.components import AgentState, Entity, Gender, Position
from biobots.agents.factory import create_agent_attributes, create_agent_entity, create_land_entity
from biobots.core.events import RecordingEventSink

NOW = 1_000_000.0

@pytest.fixture
def sink() -> RecordingEventSink:
    return RecordingEventSink()

def make_agent(
    x: float = 1000.0,
    y: float = 1000.0,
    state: AgentState = AgentState.IDLE,
    energy: float = 100.0,
    now: float = NOW,
) -> Entity:
    attrs = create_agent_attributes(Gender.MALE, rng=random.Random(7))
    attrs.state = state
    attrs.energy = energy
    return create_agent_entity(attrs, Position(x, y), now=now)

def make_land(
    x: float = 1000.0,
    y: float = 1000.0,
    resource_level: float = 0.0,
    empty_since: Optional[float] = None,
    now: float = NOW,
) -> Entity:
    land = create_land_entity(Position(x, y), now=now)
    land.land_attributes.resource_level = resource_level
    land.land_attributes.empty_since = empty_since
    return land
