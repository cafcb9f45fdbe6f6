"""Error hierarchy for the player-facing BioBots layer.

The simulation processors never raise; these are raised by configuration
handling and by player actions on a BioBotWorld.
"""


class BioBotsError(Exception):
    """Base for all BioBots errors."""

    pass


class ConfigError(BioBotsError):
    """Configuration option is not recognised or not valid."""

    pass


class InsufficientManaError(BioBotsError):
    """Player cannot afford the requested action."""

    def __init__(self, cost: float, available: float):
        self.cost = cost
        self.available = available
        super().__init__(f"Action costs {cost:g} mana but only {available:g} is available")


class EntityNotFoundError(BioBotsError, KeyError):
    """No entity of the expected kind has the given id."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class InvalidActionError(BioBotsError):
    """Action is not allowed in the current world state."""

    pass
