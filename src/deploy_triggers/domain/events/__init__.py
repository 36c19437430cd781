"""Domain events package."""

from deploy_triggers.domain.events.rollout_events import (
    RolloutConflictDetected,
    RolloutTriggered,
)


__all__ = [
    "RolloutConflictDetected",
    "RolloutTriggered",
]
