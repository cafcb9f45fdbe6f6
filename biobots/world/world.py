import logging
import math
import random
import time
from dataclasses import dataclass, replace
from typing import List, Optional

from biobots.agents.components import AgentState, Entity, EntityKind, Gender, Position
from biobots.agents.factory import (
    create_agent_attributes,
    create_agent_entity,
    create_land_entity,
    random_gender,
)
from biobots.config import DEFAULT_CONFIG, GameConfig
from biobots.core.events import EventCategory, EventSeverity, EventSink, EventType, NULL_SINK, emit
from biobots.errors import EntityNotFoundError, InvalidActionError
from biobots.world.player import Player
from biobots.world.scoring import next_level
from biobots.world.update import advance_world

logger = logging.getLogger(__name__)

@dataclass
class WorldStats:
    """Aggregate figures over the current snapshot."""
    global_score: float
    average_energy: float
    living_agents: int
    dead_agents: int
    lands: int

class BioBotWorld:
    """
    Owns the authoritative entity snapshot and the player's mana ledger.

    Player actions replace the touched entity with an updated copy, so a
    snapshot handed out earlier is never modified afterwards.

    Args:
        config: Simulation constants.
        sink: Game event sink shared with the processors.
        rng: Random source for spawning and behavior.
        player: Existing ledger; a fresh one from ``config`` when omitted.
    """
    def __init__(
        self,
        config: GameConfig = DEFAULT_CONFIG,
        sink: EventSink = NULL_SINK,
        rng: Optional[random.Random] = None,
        player: Optional[Player] = None,
    ) -> None:
        self.config: GameConfig = config
        self.sink: EventSink = sink
        self.rng: Optional[random.Random] = rng
        self.player: Player = player if player is not None else Player.from_config(config)
        self.entities: List[Entity] = []
        self.tick_count: int = 0
        self.level: int = 1

    def _now(self, now: Optional[float]) -> float:
        return now if now is not None else time.time() * 1000

    def _user_action(self, action: str, timestamp: Optional[float] = None, **payload) -> None:
        emit(
            self.sink, EventType.USER_ACTION, EventCategory.USER, EventSeverity.INFO,
            {"action": action, **payload}, timestamp=timestamp,
        )

    def is_within_bounds(self, position: Position) -> bool:
        return 0 <= position.x <= self.config.world_size and 0 <= position.y <= self.config.world_size

    def _check_bounds(self, position: Position) -> None:
        if not self.is_within_bounds(position):
            raise InvalidActionError(f"Position ({position.x}, {position.y}) is out of bounds.")

    def get(self, entity_id: str) -> Optional[Entity]:
        for entity in self.entities:
            if entity.id == entity_id:
                return entity
        return None

    def _find(self, entity_id: str, kind: EntityKind) -> int:
        for index, entity in enumerate(self.entities):
            if entity.id == entity_id and entity.kind is kind:
                return index
        raise EntityNotFoundError(f"No {kind.value.lower()} with id {entity_id}")

    def _index_of(self, entity_id: str) -> int:
        for index, entity in enumerate(self.entities):
            if entity.id == entity_id:
                return index
        raise EntityNotFoundError(f"No entity with id {entity_id}")

    def add_entity(self, entity: Entity) -> None:
        """Adds an already-built entity (e.g. a restored save) without charging mana."""
        self.entities = [*self.entities, entity]

    def remove_entity(self, entity_id: str) -> None:
        self.entities = [e for e in self.entities if e.id != entity_id]

    def spawn_agent(
        self,
        position: Position,
        gender: Optional[Gender] = None,
        name: Optional[str] = None,
        now: Optional[float] = None,
    ) -> Entity:
        """Spends one action to create a BioBot at ``position``.

        Raises:
            InsufficientManaError: If the player cannot pay for it.
            InvalidActionError: If ``position`` is outside the world.
        """
        self._check_bounds(position)
        self.player.spend(self.config.action_cost)
        gender = gender if gender is not None else random_gender(self.rng)
        attributes = create_agent_attributes(gender, name, rng=self.rng)
        now = self._now(now)
        entity = create_agent_entity(attributes, position, now=now, sink=self.sink)
        self.add_entity(entity)
        self.player.stats.entities_created += 1
        self._user_action("CREATE_AGENT", now, id=entity.id, cost=self.config.action_cost)
        return entity

    def spawn_land(self, position: Position, now: Optional[float] = None) -> Entity:
        """Spends one action to create an empty land node at ``position``."""
        self._check_bounds(position)
        self.player.spend(self.config.action_cost)
        now = self._now(now)
        entity = create_land_entity(position, now=now, sink=self.sink, config=self.config)
        self.add_entity(entity)
        self.player.stats.lands_created += 1
        self._user_action("CREATE_LAND", now, id=entity.id, cost=self.config.action_cost)
        return entity

    def water_land(self, land_id: str, now: Optional[float] = None) -> Entity:
        """Spends one action to grow a land node's resource.

        Raises:
            EntityNotFoundError: If no land node has ``land_id``. Nothing is charged.
        """
        index = self._find(land_id, EntityKind.LAND)
        land = self.entities[index]
        if land.land_attributes is None:
            raise EntityNotFoundError(f"Land {land_id} has no resource record")
        self.player.spend(self.config.action_cost)

        before = land.land_attributes.resource_level
        level = min(self.config.max_resource, before + self.config.growth_per_water)
        land_attributes = replace(
            land.land_attributes,
            resource_level=level,
            empty_since=None if level > 0 else land.land_attributes.empty_since,
        )
        watered = replace(land, land_attributes=land_attributes)
        self.entities = [*self.entities[:index], watered, *self.entities[index + 1:]]
        emit(self.sink, EventType.LAND_WATERED, EventCategory.ECONOMY, EventSeverity.INFO, {
            "id": land_id,
            "from": before,
            "to": level,
        }, timestamp=self._now(now))
        return watered

    def assign_work(self, agent_id: Optional[str] = None, now: Optional[float] = None) -> List[Entity]:
        """Spends one action to put BioBots to work.

        Every living BioBot is assigned, or only ``agent_id`` when given.

        Returns:
            The BioBots that were assigned.
        """
        if agent_id is not None:
            self._find(agent_id, EntityKind.AGENT)
        self.player.spend(self.config.action_cost)
        now = self._now(now)
        work_end_time = now + self.config.work_duration_ms

        assigned: List[Entity] = []
        updated: List[Entity] = []
        for entity in self.entities:
            attrs = entity.attributes
            if (
                entity.is_agent
                and attrs is not None
                and not attrs.is_dead
                and (agent_id is None or entity.id == agent_id)
            ):
                entity = replace(entity, attributes=replace(
                    attrs, state=AgentState.WORKING, work_end_time=work_end_time,
                ))
                assigned.append(entity)
            updated.append(entity)
        self.entities = updated
        self._user_action("CREATE_WORK", now, target=agent_id, assigned=len(assigned), work_end_time=work_end_time)
        return assigned

    def kill_agent(self, agent_id: str, now: Optional[float] = None) -> Entity:
        """Kills a BioBot immediately. Costs nothing.

        Raises:
            InvalidActionError: If manual kills are disabled.
            EntityNotFoundError: If no BioBot has ``agent_id``.
        """
        if not self.config.enable_manual_kill:
            raise InvalidActionError("Manual kills are disabled.")
        index = self._find(agent_id, EntityKind.AGENT)
        entity = self.entities[index]
        attrs = entity.attributes
        if attrs is None or attrs.is_dead:
            return entity

        now = self._now(now)
        killed = replace(entity, attributes=replace(
            attrs,
            state=AgentState.DEAD,
            energy=0.0,
            death_timestamp=now,
            work_end_time=None,
        ))
        self.entities = [*self.entities[:index], killed, *self.entities[index + 1:]]
        emit(self.sink, EventType.AGENT_DIED, EventCategory.LIFECYCLE, EventSeverity.CRITICAL, {
            "id": agent_id,
            "name": attrs.name,
            "cause": "manual",
            "previous_state": attrs.state.value,
            "individual_score": attrs.individual_score,
        }, timestamp=now)
        return killed

    def move_entity(self, entity_id: str, position: Position) -> Entity:
        """Drops any entity at ``position``. Costs nothing.

        Raises:
            InvalidActionError: If ``position`` is outside the world.
            EntityNotFoundError: If no entity has ``entity_id``.
        """
        self._check_bounds(position)
        index = self._index_of(entity_id)
        moved = replace(self.entities[index], position=Position(position.x, position.y))
        self.entities = [*self.entities[:index], moved, *self.entities[index + 1:]]
        return moved

    def buy_mana(self, amount: float, now: Optional[float] = None) -> None:
        self.player.add_points(amount)
        self._user_action("BUY_MANA", now, amount=amount)
        self._update_level(now)

    @property
    def available_score(self) -> float:
        """Score earned by the BioBots that has not been exchanged yet."""
        return max(0.0, self.stats().global_score - self.player.stats.crypto_spent)

    def exchange_score(self, amount: float, now: Optional[float] = None) -> float:
        """Trades earned score for mana at ``config.exchange_rate`` score per point.

        Only whole points of mana are bought; the remainder of ``amount`` is
        not spent.

        Returns:
            The mana gained.

        Raises:
            ValueError: If ``amount`` is not positive.
            InvalidActionError: If ``amount`` exceeds the available score.
        """
        if amount <= 0:
            raise ValueError(f"Amount must be positive, got {amount}")
        available = self.available_score
        if amount > available:
            raise InvalidActionError(f"Only {available:g} score is available to exchange.")

        gained = float(math.floor(amount / self.config.exchange_rate))
        cost = gained * self.config.exchange_rate
        self.player.points += gained
        self.player.stats.crypto_spent += cost
        self._user_action("EXCHANGE_SCORE", now, amount=amount, cost=cost, gained=gained)
        self._update_level(now)
        return gained

    def _update_level(self, now: Optional[float] = None) -> None:
        level = next_level(self.level, self.available_score, self.player.points, self.config)
        if level == self.level:
            return
        previous, self.level = self.level, level
        logger.info("Reached level %d", level)
        emit(self.sink, EventType.LEVEL_UP, EventCategory.ECONOMY, EventSeverity.INFO, {
            "from": previous,
            "to": level,
        }, timestamp=self._now(now))

    def tick(self, now: Optional[float] = None) -> List[Entity]:
        """Advances the world by one step and returns the new snapshot."""
        now = self._now(now)
        before = len(self.entities)
        self.entities = advance_world(
            self.entities,
            self.config.speed,
            self.config.interaction_radius,
            now=now,
            config=self.config,
            sink=self.sink,
            rng=self.rng,
        )
        self.tick_count += 1
        if len(self.entities) != before:
            logger.debug("Tick %d removed %d entities", self.tick_count, before - len(self.entities))
        self._update_level(now)
        return self.entities

    @property
    def agents(self) -> List[Entity]:
        return [e for e in self.entities if e.is_agent]

    @property
    def lands(self) -> List[Entity]:
        return [e for e in self.entities if e.is_land]

    def stats(self) -> WorldStats:
        total_score = 0.0
        total_energy = 0.0
        living = 0
        dead = 0
        for entity in self.agents:
            attrs = entity.attributes
            if attrs is None:
                continue
            total_score += attrs.individual_score
            if attrs.is_dead:
                dead += 1
            else:
                living += 1
                total_energy += attrs.energy
        return WorldStats(
            global_score=total_score,
            average_energy=total_energy / living if living else 0.0,
            living_agents=living,
            dead_agents=dead,
            lands=len(self.lands),
        )
