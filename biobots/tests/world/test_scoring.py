import pytest

from biobots.config import GameConfig
from biobots.world.scoring import Tier, next_level, resource_tier, score_rate

CONFIG = GameConfig()

@pytest.mark.parametrize("level, expected", [
    (100, CONFIG.green_tick),
    (75, CONFIG.pink_tick),
    (50, CONFIG.pink_tick),
    (49, CONFIG.yellow_tick),
    (49.999, CONFIG.yellow_tick),
    (0, CONFIG.yellow_tick),
])
def test_score_rate_tiers(level: float, expected: float) -> None:
    assert score_rate(level) == expected

def test_tier_boundaries_are_inclusive() -> None:
    assert resource_tier(100) is Tier.GREEN
    assert resource_tier(99.99) is Tier.PINK
    assert resource_tier(50) is Tier.PINK
    assert resource_tier(0) is Tier.YELLOW

def test_score_rate_follows_config() -> None:
    config = GameConfig(stage_1_threshold=10, stage_2_threshold=20, green_tick=3.0, pink_tick=2.0, yellow_tick=1.0)
    assert score_rate(20, config) == 3.0
    assert score_rate(10, config) == 2.0
    assert score_rate(9, config) == 1.0

@pytest.mark.parametrize("current,score,mana,expected", [
    (1, 0, 0, 1),
    (1, 8000, 400, 1),
    (1, 8001, 0, 2),
    (1, 0, 401, 2),
    (1, 16001, 0, 3),
    (2, 0, 801, 3),
    (3, 0, 0, 3),
    (2, 0, 0, 2),
])
def test_next_level(current: int, score: float, mana: float, expected: int) -> None:
    assert next_level(current, score, mana, CONFIG) == expected
