from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

class EntityKind(Enum):
    """Discriminator for the entities living in the world."""
    AGENT = "AGENT" # BioBot
    LAND = "LAND" # Resource node
    WALLET = "WALLET" # Stationary marker, advanced unchanged

class Gender(Enum):
    MALE = "ALFA"
    FEMALE = "BETA"

class AgentState(Enum):
    """Behavioral states of a BioBot. DEAD is terminal."""
    IDLE = "IDLE"
    WORKING = "WORKING"
    WALKING = "WALKING"
    SOCIALIZING = "SOCIALIZING" # Reserved, never entered by the engine
    FEEDING = "FEEDING"
    DEAD = "DEAD"

@dataclass
class Position:
    """Represents the position of an entity in world coordinates."""
    x: float
    y: float

    def copy(self) -> "Position":
        return Position(self.x, self.y)

@dataclass
class AgentAttributes:
    """State carried by a BioBot from tick to tick.

    Args:
        name: Display name, fixed at creation.
        gender: Cosmetic only.
        age: Cosmetic, 1-10.
        energy: 0-100, drives state transitions and survival.
        state: Current AgentState.
        personality: Cosmetic, drawn from a fixed pool.
        strength: Cosmetic, 1-10.
        intelligence: Cosmetic, 1-10.
        individual_score: Points earned while working a resourced node.
        work_end_time: Timestamp (ms) when the current work order expires.
        zero_energy_since: Timestamp (ms) when energy last reached zero.
        death_timestamp: Timestamp (ms) when the agent became DEAD.
    """
    name: str
    gender: Gender
    age: int = 1
    energy: float = 100.0
    state: AgentState = AgentState.IDLE
    personality: str = ""
    strength: int = 1
    intelligence: int = 1
    individual_score: float = 0.0
    work_end_time: Optional[float] = None
    zero_energy_since: Optional[float] = None
    death_timestamp: Optional[float] = None

    @property
    def is_dead(self) -> bool:
        return self.state is AgentState.DEAD

@dataclass
class LandAttributes:
    """State of a resource node."""
    resource_level: float = 0.0 # 0-100
    empty_since: Optional[float] = None # Timestamp (ms) when the level last reached zero

@dataclass
class Entity:
    """A single thing in the world: a BioBot, a land node or a marker.

    Only the attribute record matching ``kind`` is expected to be set, but
    processors tolerate either being missing.
    """
    id: str
    kind: EntityKind
    position: Position
    created_at: float
    attributes: Optional[AgentAttributes] = None
    land_attributes: Optional[LandAttributes] = None

    @property
    def is_agent(self) -> bool:
        return self.kind is EntityKind.AGENT

    @property
    def is_land(self) -> bool:
        return self.kind is EntityKind.LAND

    def copy(self) -> "Entity":
        """Returns a copy with fresh position and attribute records."""
        return replace(
            self,
            position=self.position.copy(),
            attributes=replace(self.attributes) if self.attributes is not None else None,
            land_attributes=replace(self.land_attributes) if self.land_attributes is not None else None,
        )
