"""Service port interfaces (hexagonal architecture)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from deploy_triggers.domain.models.workload import DeploymentCause, WorkloadConfig


class RolloutCreator(ABC):
    """Port for materializing a new rollout."""

    @abstractmethod
    async def create(self, config: WorkloadConfig, causes: list[DeploymentCause]) -> str:
        """Create a rollout for the config and return its ID."""


class EventPublisher(ABC):
    """Port for publishing domain events."""

    @abstractmethod
    async def publish(self, event_type: str, payload: dict[str, Any]) -> None:
        """Publish an event."""

    @abstractmethod
    async def publish_batch(self, events: list[tuple[str, dict[str, Any]]]) -> None:
        """Publish a batch of events."""
