"""Configuration for the payments engine."""

import os
from dataclasses import dataclass

from exceptions import ConfigurationError
from message_queue import DEFAULT_CAPACITY


@dataclass
class EngineConfig:
    """Engine settings. Defaults match a plain CLI run."""

    queue_capacity: int = DEFAULT_CAPACITY
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.queue_capacity <= 0:
            raise ConfigurationError(f"Queue capacity must be positive, got {self.queue_capacity}")

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from PAYMENTS_QUEUE_CAPACITY and PAYMENTS_LOG_LEVEL."""
        capacity_str = os.getenv("PAYMENTS_QUEUE_CAPACITY", str(DEFAULT_CAPACITY))
        try:
            queue_capacity = int(capacity_str)
        except ValueError:
            raise ConfigurationError(
                f"PAYMENTS_QUEUE_CAPACITY must be an integer, got {capacity_str!r}"
            ) from None

        return cls(
            queue_capacity=queue_capacity,
            log_level=os.getenv("PAYMENTS_LOG_LEVEL", "WARNING"),
        )
