import random

import pytest

from conftest import NOW

from biobots.agents.components import AgentState, Gender, Position
from biobots.config import GameConfig
from biobots.core.events import EventType, RecordingEventSink
from biobots.errors import EntityNotFoundError, InsufficientManaError, InvalidActionError
from biobots.world.player import Player
from biobots.world.world import BioBotWorld

@pytest.fixture
def world(sink: RecordingEventSink) -> BioBotWorld:
    return BioBotWorld(GameConfig(initial_points=100), sink=sink, rng=random.Random(21))

@pytest.mark.world
def test_spawning_costs_mana_and_updates_stats(world: BioBotWorld, sink: RecordingEventSink) -> None:
    agent = world.spawn_agent(Position(1000, 1000), gender=Gender.FEMALE, name="Nova", now=NOW)
    land = world.spawn_land(Position(1100, 1000), now=NOW)

    assert world.player.points == 80
    assert world.player.stats.entities_created == 1
    assert world.player.stats.lands_created == 1
    assert world.player.stats.mana_spent == 20
    assert [e.id for e in world.entities] == [agent.id, land.id]
    assert agent.attributes.name == "Nova"
    assert len(sink.of_type(EventType.AGENT_CREATED)) == 1
    assert len(sink.of_type(EventType.LAND_CREATED)) == 1
    assert len(sink.of_type(EventType.USER_ACTION)) == 2

@pytest.mark.world
def test_spawning_without_mana_raises(sink: RecordingEventSink) -> None:
    world = BioBotWorld(GameConfig(initial_points=5), sink=sink)
    with pytest.raises(InsufficientManaError):
        world.spawn_land(Position(10, 10), now=NOW)
    assert world.entities == []
    assert world.player.points == 5

@pytest.mark.world
def test_spawning_out_of_bounds_is_rejected(world: BioBotWorld) -> None:
    with pytest.raises(InvalidActionError):
        world.spawn_agent(Position(-1, 10), now=NOW)
    assert world.player.points == 100

@pytest.mark.world
def test_watering_grows_resource_and_clears_timer(world: BioBotWorld, sink: RecordingEventSink) -> None:
    land = world.spawn_land(Position(1000, 1000), now=NOW)
    watered = world.water_land(land.id)

    assert watered.land_attributes.resource_level == 50
    assert watered.land_attributes.empty_since is None
    assert land.land_attributes.resource_level == 0, "Previously returned entities must not change."

    world.water_land(land.id)
    again = world.water_land(land.id)
    assert again.land_attributes.resource_level == 100, "Watering is clamped at the maximum."
    assert world.player.points == 60
    assert len(sink.of_type(EventType.LAND_WATERED)) == 3

@pytest.mark.world
def test_watering_unknown_land_is_free(world: BioBotWorld) -> None:
    agent = world.spawn_agent(Position(1000, 1000), now=NOW)
    with pytest.raises(EntityNotFoundError):
        world.water_land("missing")
    with pytest.raises(EntityNotFoundError):
        world.water_land(agent.id)
    assert world.player.points == 90

@pytest.mark.world
def test_assign_work_to_all_living_agents(world: BioBotWorld) -> None:
    first = world.spawn_agent(Position(1000, 1000), now=NOW)
    second = world.spawn_agent(Position(2000, 1000), now=NOW)
    world.kill_agent(second.id, now=NOW)

    assigned = world.assign_work(now=NOW)

    assert [e.id for e in assigned] == [first.id]
    working = world.get(first.id)
    assert working.attributes.state is AgentState.WORKING
    assert working.attributes.work_end_time == NOW + world.config.work_duration_ms
    assert world.get(second.id).attributes.state is AgentState.DEAD
    assert first.attributes.state is AgentState.IDLE

@pytest.mark.world
def test_assign_work_to_single_agent(world: BioBotWorld) -> None:
    first = world.spawn_agent(Position(1000, 1000), now=NOW)
    second = world.spawn_agent(Position(2000, 1000), now=NOW)
    world.assign_work(second.id, now=NOW)
    assert world.get(first.id).attributes.state is AgentState.IDLE
    assert world.get(second.id).attributes.state is AgentState.WORKING
    with pytest.raises(EntityNotFoundError):
        world.assign_work("nobody", now=NOW)

@pytest.mark.world
def test_kill_agent_is_final(world: BioBotWorld, sink: RecordingEventSink) -> None:
    agent = world.spawn_agent(Position(1000, 1000), now=NOW)
    points = world.player.points

    killed = world.kill_agent(agent.id, now=NOW)
    assert killed.attributes.state is AgentState.DEAD
    assert killed.attributes.energy == 0
    assert killed.attributes.death_timestamp == NOW
    assert world.player.points == points

    again = world.kill_agent(agent.id, now=NOW + 500)
    assert again.attributes.death_timestamp == NOW
    assert len(sink.of_type(EventType.AGENT_DIED)) == 1

@pytest.mark.world
def test_kill_agent_can_be_disabled() -> None:
    world = BioBotWorld(GameConfig(enable_manual_kill=False))
    agent = world.spawn_agent(Position(1000, 1000), now=NOW)
    with pytest.raises(InvalidActionError):
        world.kill_agent(agent.id, now=NOW)

@pytest.mark.world
def test_tick_advances_and_reports_stats(world: BioBotWorld) -> None:
    land = world.spawn_land(Position(1000, 1000), now=NOW)
    world.water_land(land.id)
    world.water_land(land.id)
    agent = world.spawn_agent(Position(1000, 1000), now=NOW)
    world.assign_work(now=NOW)

    for step in range(10):
        world.tick(now=NOW + step * 16)

    stats = world.stats()
    assert world.tick_count == 10
    assert stats.global_score == pytest.approx(10 * world.config.green_tick)
    assert stats.living_agents == 1 and stats.dead_agents == 0 and stats.lands == 1
    assert stats.average_energy == pytest.approx(world.get(agent.id).attributes.energy)

@pytest.mark.world
def test_stats_of_empty_world() -> None:
    stats = BioBotWorld().stats()
    assert stats.global_score == 0 and stats.average_energy == 0 and stats.lands == 0

@pytest.mark.world
def test_buy_mana(world: BioBotWorld) -> None:
    world.buy_mana(25)
    assert world.player.points == 125
    with pytest.raises(ValueError):
        world.buy_mana(0)

@pytest.mark.world
def test_player_ledger() -> None:
    player = Player(points=15)
    assert player.can_afford(15)
    player.spend(10)
    assert player.points == 5 and player.stats.mana_spent == 10
    with pytest.raises(InsufficientManaError) as excinfo:
        player.spend(10)
    assert excinfo.value.cost == 10 and excinfo.value.available == 5

def give_score(world: BioBotWorld, score: float) -> None:
    agent = world.spawn_agent(Position(1000, 1000), now=NOW)
    agent.attributes.individual_score = score

@pytest.mark.world
def test_exchange_score_for_mana(world: BioBotWorld, sink: RecordingEventSink) -> None:
    give_score(world, 125.7)
    points = world.player.points

    gained = world.exchange_score(105, now=NOW)

    assert gained == 10
    assert world.player.points == points + 10
    assert world.player.stats.crypto_spent == 100, "Only whole points of mana are bought."
    assert world.available_score == pytest.approx(25.7)
    (event,) = [e for e in sink.of_type(EventType.USER_ACTION) if e.payload["action"] == "EXCHANGE_SCORE"]
    assert event.timestamp == NOW

@pytest.mark.world
def test_exchange_rejects_more_than_available(world: BioBotWorld) -> None:
    give_score(world, 50)
    world.exchange_score(50)
    with pytest.raises(InvalidActionError):
        world.exchange_score(10)
    with pytest.raises(ValueError):
        world.exchange_score(0)
    assert world.player.stats.crypto_spent == 50

@pytest.mark.world
def test_level_rises_with_mana_and_score(sink: RecordingEventSink) -> None:
    world = BioBotWorld(GameConfig(initial_points=100), sink=sink)
    assert world.level == 1

    world.buy_mana(300, now=NOW)
    assert world.level == 1, "Minimums are exclusive."
    world.buy_mana(1, now=NOW)
    assert world.level == 2

    give_score(world, world.config.level_3_min_score + 1)
    world.tick(now=NOW)
    assert world.level == 3
    assert [(e.payload["from"], e.payload["to"]) for e in sink.of_type(EventType.LEVEL_UP)] == [(1, 2), (2, 3)]

@pytest.mark.world
def test_level_can_skip_to_three_and_never_drops() -> None:
    world = BioBotWorld(GameConfig(initial_points=10))
    world.buy_mana(world.config.level_3_min_mana, now=NOW)
    assert world.level == 3
    world.spawn_land(Position(10, 10), now=NOW)
    world.tick(now=NOW)
    assert world.level == 3

@pytest.mark.world
def test_move_entity_is_copy_on_write(world: BioBotWorld) -> None:
    land = world.spawn_land(Position(1000, 1000), now=NOW)
    target = Position(2500, 300)

    moved = world.move_entity(land.id, target)

    assert (moved.position.x, moved.position.y) == (2500, 300)
    assert moved.position is not target
    assert (land.position.x, land.position.y) == (1000, 1000), "Earlier snapshots keep their position."
    assert world.get(land.id) is moved
    assert world.player.points == 90

@pytest.mark.world
def test_move_entity_checks_bounds_and_id(world: BioBotWorld) -> None:
    agent = world.spawn_agent(Position(1000, 1000), now=NOW)
    with pytest.raises(InvalidActionError):
        world.move_entity(agent.id, Position(world.config.world_size + 1, 10))
    with pytest.raises(EntityNotFoundError):
        world.move_entity("missing", Position(10, 10))
    assert world.get(agent.id).position.x == 1000
