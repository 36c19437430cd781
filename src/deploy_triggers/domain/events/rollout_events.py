"""Rollout trigger domain events."""

from __future__ import annotations

from pydantic import Field

from deploy_triggers.domain.models.base import DomainEvent
from deploy_triggers.domain.models.workload import DeploymentCause


class RolloutTriggered(DomainEvent):
    """Emitted when a reconciliation pass creates a rollout."""

    namespace: str
    config_name: str
    version: int
    rollout_id: str
    causes: list[DeploymentCause] = Field(default_factory=list)
    event_type: str = "rollout.triggered"


class RolloutConflictDetected(DomainEvent):
    """Emitted when change detection refuses to attribute a cause."""

    namespace: str
    config_name: str
    reason: str
    event_type: str = "rollout.conflict"
