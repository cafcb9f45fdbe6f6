"""Removal timers for land nodes and BioBots.

Both processors mutate the attribute records they are given in place and
return whether the entity should be dropped from the world this tick.
"""

from biobots.agents.components import AgentAttributes, AgentState, Entity
from biobots.config import DEFAULT_CONFIG, GameConfig
from biobots.core.events import EventCategory, EventSeverity, EventSink, EventType, NULL_SINK, emit

def process_land_decay(
    entity: Entity,
    now: float,
    config: GameConfig = DEFAULT_CONFIG,
    sink: EventSink = NULL_SINK,
) -> bool:
    """Arms or clears the emptiness timer of a land node.

    Returns:
        True once the node has been empty for longer than ``decay_timeout_ms``.
        A node with any resource is never removed.
    """
    attrs = entity.land_attributes
    if attrs is None:
        return False

    if attrs.resource_level > 0:
        attrs.empty_since = None
        return False

    if attrs.empty_since is None:
        attrs.empty_since = now

    decayed = (now - attrs.empty_since) > config.decay_timeout_ms
    if decayed:
        emit(sink, EventType.LAND_DECAYED, EventCategory.ECONOMY, EventSeverity.WARNING, {
            "id": entity.id,
            "empty_since": attrs.empty_since,
            "empty_for_ms": now - attrs.empty_since,
        }, timestamp=now)
    return decayed

def process_death_lifecycle(
    entity: Entity,
    attrs: AgentAttributes,
    now: float,
    config: GameConfig = DEFAULT_CONFIG,
    sink: EventSink = NULL_SINK,
) -> bool:
    """Advances the starvation and death timers of a BioBot.

    A BioBot at zero energy for ``time_to_die_ms`` becomes DEAD. A DEAD
    BioBot stays in the world for the frozen and fade periods, so this never
    returns True on the tick the death happens.

    Returns:
        True when the BioBot has finished fading and should be removed.
    """
    if attrs is None:
        return False

    if attrs.state is AgentState.DEAD:
        if attrs.death_timestamp is None:
            attrs.death_timestamp = now
        time_dead = now - attrs.death_timestamp
        return time_dead > config.time_frozen_ms + config.fade_duration_ms

    if attrs.energy <= 0:
        if attrs.zero_energy_since is None:
            attrs.zero_energy_since = now

        if config.enable_auto_death and now - attrs.zero_energy_since >= config.time_to_die_ms:
            previous = attrs.state
            attrs.state = AgentState.DEAD
            attrs.death_timestamp = now
            attrs.work_end_time = None
            emit(sink, EventType.AGENT_DIED, EventCategory.LIFECYCLE, EventSeverity.CRITICAL, {
                "id": entity.id,
                "name": attrs.name,
                "cause": "starvation",
                "previous_state": previous.value,
                "individual_score": attrs.individual_score,
            }, timestamp=now)
    else:
        attrs.zero_energy_since = None

    return False
