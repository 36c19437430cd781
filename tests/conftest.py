"""Shared test fixtures."""

from __future__ import annotations

import pytest

from deploy_triggers.api.dependencies.services import ServiceContainer
from deploy_triggers.config import Environment, Settings
from deploy_triggers.domain.models.trigger import (
    ConfigChangeTrigger,
    ImageChangeParams,
    ImageChangeTrigger,
    ImageStreamTagReference,
)
from deploy_triggers.domain.models.workload import Container, PodTemplate, WorkloadConfig
from deploy_triggers.domain.services.image_resolver import ImageTagResolver
from deploy_triggers.domain.services.reconciliation_service import ReconciliationService
from deploy_triggers.domain.services.trigger_processor import TriggerProcessor
from deploy_triggers.infrastructure.messaging.event_publisher import InMemoryEventPublisher
from deploy_triggers.infrastructure.persistence.repositories.in_memory import (
    InMemoryImageStreamRepository,
    InMemoryRolloutRepository,
    InMemoryWorkloadConfigRepository,
)


IMAGE_STREAM_NAME = "test-image-stream"
IMAGE_ID = "sha256:0000000000000000000000000000000000000000000000000000000000000001"
DOCKER_IMAGE_REFERENCE = f"registry:5000/openshift/{IMAGE_STREAM_NAME}@{IMAGE_ID}"


@pytest.fixture(autouse=True)
def clear_stores() -> None:
    """Clear in-memory stores before each test."""
    InMemoryImageStreamRepository.clear()
    InMemoryRolloutRepository.clear()
    InMemoryWorkloadConfigRepository.clear()
    ServiceContainer.reset()


@pytest.fixture
def settings() -> Settings:
    return Settings(environment=Environment.TESTING, debug=True)


@pytest.fixture
def image_stream_repo() -> InMemoryImageStreamRepository:
    return InMemoryImageStreamRepository()


@pytest.fixture
def rollout_repo() -> InMemoryRolloutRepository:
    return InMemoryRolloutRepository()


@pytest.fixture
def config_repo() -> InMemoryWorkloadConfigRepository:
    return InMemoryWorkloadConfigRepository()


@pytest.fixture
def event_publisher() -> InMemoryEventPublisher:
    return InMemoryEventPublisher()


@pytest.fixture
def resolver(image_stream_repo: InMemoryImageStreamRepository) -> ImageTagResolver:
    return ImageTagResolver(image_stream_repo)


@pytest.fixture
def trigger_processor(resolver: ImageTagResolver) -> TriggerProcessor:
    return TriggerProcessor(resolver)


@pytest.fixture
def reconciliation_service(
    trigger_processor: TriggerProcessor,
    rollout_repo: InMemoryRolloutRepository,
    config_repo: InMemoryWorkloadConfigRepository,
    event_publisher: InMemoryEventPublisher,
) -> ReconciliationService:
    return ReconciliationService(
        trigger_processor=trigger_processor,
        rollout_repo=rollout_repo,
        rollout_creator=rollout_repo,
        event_publisher=event_publisher,
        config_repo=config_repo,
    )


@pytest.fixture
def sample_template() -> PodTemplate:
    return PodTemplate(
        containers=[
            Container(name="container1", image="registry:8080/repo1:ref1"),
            Container(name="container2", image="registry:8080/repo1:ref2"),
        ],
        labels={"app": "test"},
    )


@pytest.fixture
def sample_config(sample_template: PodTemplate) -> WorkloadConfig:
    """Initial config with a config change and an automatic image change trigger."""
    return WorkloadConfig(
        namespace="default",
        name="config",
        template=sample_template,
        triggers=[
            ConfigChangeTrigger(),
            ImageChangeTrigger(
                image_change_params=ImageChangeParams(
                    automatic=True,
                    container_names=["container1"],
                    from_=ImageStreamTagReference(stream_name=IMAGE_STREAM_NAME, tag="latest"),
                ),
            ),
        ],
    )
