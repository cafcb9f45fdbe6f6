from dataclasses import dataclass, field

from biobots.config import DEFAULT_CONFIG, GameConfig
from biobots.errors import InsufficientManaError

@dataclass
class PlayerStats:
    """Lifetime counters for the player."""
    entities_created: int = 0
    lands_created: int = 0
    mana_spent: float = 0.0
    crypto_spent: float = 0.0 # Score already exchanged for mana

@dataclass
class Player:
    """The mana ledger the player spends to shape the world."""
    name: str = "Architect"
    points: float = DEFAULT_CONFIG.initial_points
    stats: PlayerStats = field(default_factory=PlayerStats)

    @classmethod
    def from_config(cls, config: GameConfig, name: str = "Architect") -> "Player":
        return cls(name=name, points=config.initial_points)

    def can_afford(self, cost: float) -> bool:
        return self.points >= cost

    def spend(self, cost: float) -> None:
        """Deducts ``cost`` points.

        Raises:
            InsufficientManaError: If fewer than ``cost`` points are available.
        """
        if not self.can_afford(cost):
            raise InsufficientManaError(cost, self.points)
        self.points -= cost
        self.stats.mana_spent += cost

    def add_points(self, amount: float) -> None:
        if amount <= 0:
            raise ValueError(f"Amount must be positive, got {amount}")
        self.points += amount
