"""Repository implementations."""

from deploy_triggers.infrastructure.persistence.repositories.in_memory import (
    InMemoryImageStreamRepository,
    InMemoryRolloutRepository,
    InMemoryWorkloadConfigRepository,
    RolloutAlreadyExistsError,
)


__all__ = [
    "InMemoryImageStreamRepository",
    "InMemoryRolloutRepository",
    "InMemoryWorkloadConfigRepository",
    "RolloutAlreadyExistsError",
]
