from enum import Enum

from biobots.config import DEFAULT_CONFIG, GameConfig

class Tier(Enum):
    """Resource-level bands of a land node."""
    YELLOW = "YELLOW"
    PINK = "PINK"
    GREEN = "GREEN"

def resource_tier(resource_level: float, config: GameConfig = DEFAULT_CONFIG) -> Tier:
    """Tier for a resource level. Thresholds are inclusive."""
    if resource_level >= config.stage_2_threshold:
        return Tier.GREEN
    if resource_level >= config.stage_1_threshold:
        return Tier.PINK
    return Tier.YELLOW

def score_rate(resource_level: float, config: GameConfig = DEFAULT_CONFIG) -> float:
    """Points a working BioBot earns per tick from a node at this level."""
    tier = resource_tier(resource_level, config)
    if tier is Tier.GREEN:
        return config.green_tick
    if tier is Tier.PINK:
        return config.pink_tick
    return config.yellow_tick

MAX_LEVEL = 3

def next_level(current: int, unspent_score: float, mana: float, config: GameConfig = DEFAULT_CONFIG) -> int:
    """Level the player should be at. Levels only go up.

    Level 3 may be reached directly from level 1. Minimums are exclusive.
    """
    if current >= MAX_LEVEL:
        return current
    if unspent_score > config.level_3_min_score or mana > config.level_3_min_mana:
        return 3
    if current < 2 and (unspent_score > config.level_2_min_score or mana > config.level_2_min_mana):
        return 2
    return current
