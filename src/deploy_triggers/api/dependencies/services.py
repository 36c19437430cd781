"""Service dependencies for FastAPI dependency injection."""

from __future__ import annotations

from deploy_triggers.config import get_settings
from deploy_triggers.domain.ports.services import EventPublisher
from deploy_triggers.domain.services.image_resolver import ImageTagResolver
from deploy_triggers.domain.services.reconciliation_service import ReconciliationService
from deploy_triggers.domain.services.trigger_processor import TriggerProcessor
from deploy_triggers.infrastructure.messaging.event_publisher import InMemoryEventPublisher
from deploy_triggers.infrastructure.persistence.repositories.in_memory import (
    InMemoryImageStreamRepository,
    InMemoryRolloutRepository,
    InMemoryWorkloadConfigRepository,
)


class ServiceContainer:
    """Simple dependency injection container.

    Implements the Composition Root pattern for assembling
    dependencies and managing their lifecycle.
    """

    _instance: ServiceContainer | None = None

    def __init__(self) -> None:
        self._settings = get_settings()
        self._event_publisher = InMemoryEventPublisher()
        self._image_stream_repo = InMemoryImageStreamRepository()
        self._rollout_repo = InMemoryRolloutRepository()
        self._config_repo = InMemoryWorkloadConfigRepository()
        self._reconciliation_service: ReconciliationService | None = None

    @classmethod
    def get_instance(cls) -> ServiceContainer:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None

    @property
    def event_publisher(self) -> EventPublisher:
        return self._event_publisher

    @property
    def image_stream_repo(self) -> InMemoryImageStreamRepository:
        return self._image_stream_repo

    @property
    def config_repo(self) -> InMemoryWorkloadConfigRepository:
        return self._config_repo

    @property
    def rollout_repo(self) -> InMemoryRolloutRepository:
        return self._rollout_repo

    @property
    def reconciliation_service(self) -> ReconciliationService:
        if self._reconciliation_service is None:
            resolver = ImageTagResolver(self._image_stream_repo)
            self._reconciliation_service = ReconciliationService(
                trigger_processor=TriggerProcessor(resolver),
                rollout_repo=self._rollout_repo,
                rollout_creator=self._rollout_repo,
                event_publisher=self._event_publisher,
                config_repo=self._config_repo,
            )
        return self._reconciliation_service


def get_service_container() -> ServiceContainer:
    return ServiceContainer.get_instance()
