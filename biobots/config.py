from dataclasses import dataclass, fields, replace
from typing import Any, Optional

from biobots.errors import ConfigError

@dataclass
class GameConfig:
    """Tunable constants for the BioBots simulation.

    Rates expressed "per tick" assume one logical tick per scheduled frame.
    """
    # World
    world_size: float = 8000.0
    speed: float = 0.5
    interaction_radius: float = 60.0
    wander_margin: float = 100.0 # Targets are clamped to [margin, world_size - margin]

    # BioBot energy
    max_energy: float = 100.0
    energy_decay_idle: float = 0.008 # ~1% every 2s at 60 FPS
    energy_decay_work: float = 0.02
    energy_decay_move: float = 0.012
    energy_recharge_rate: float = 0.8
    hunger_threshold: float = 90.0
    feeding_radius: float = 80.0
    feeding_speed_factor: float = 0.2
    work_duration_ms: float = 180000.0 # 3 minutes

    # Land
    initial_resource: float = 0.0
    growth_per_water: float = 50.0
    max_resource: float = 100.0
    stage_1_threshold: float = 50.0 # Pink tier
    stage_2_threshold: float = 100.0 # Green tier
    decay_timeout_ms: float = 120000.0 # 2 minutes
    consumption_rate: float = 0.08

    # Scoring (points per tick)
    green_tick: float = 1.66
    pink_tick: float = 0.83
    yellow_tick: float = 0.16

    # Death
    enable_auto_death: bool = True
    enable_manual_kill: bool = True
    time_to_die_ms: float = 600000.0 # 10 minutes at zero energy
    time_frozen_ms: float = 300000.0 # 5 minutes frozen before fading
    fade_duration_ms: float = 5000.0

    # Player economy
    initial_points: float = 50.0
    action_cost: float = 10.0
    exchange_rate: float = 10.0 # Score per point of mana

    # Levels (reached when unspent score or mana exceeds either minimum)
    level_2_min_score: float = 8000.0
    level_2_min_mana: float = 400.0
    level_3_min_score: float = 16000.0
    level_3_min_mana: float = 800.0

    # Tick driver
    target_fps: float = 60.0
    fixed_step_ms: Optional[float] = None # Advance simulated time by a fixed step per frame

    def with_overrides(self, **overrides: Any) -> "GameConfig":
        """Returns a copy with the given options replaced.

        Raises:
            ConfigError: If an option name is not recognised.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration option(s): {', '.join(unknown)}")
        return replace(self, **overrides)


DEFAULT_CONFIG = GameConfig()
