"""In-memory repository implementations for development and testing."""

from __future__ import annotations

from deploy_triggers.domain.models.image_stream import ImageStream, TagEvent
from deploy_triggers.domain.models.rollout import decode_config, RealizedDeployment
from deploy_triggers.domain.models.workload import (
    DeploymentCause,
    DeploymentDetails,
    WorkloadConfig,
)
from deploy_triggers.domain.ports.repositories import (
    ImageStreamNotFoundError,
    ImageStreamRepository,
    RolloutRepository,
    WorkloadConfigRepository,
)
from deploy_triggers.domain.ports.services import RolloutCreator


# Module-level shared stores enable cross-instance access in the demo API
# while keeping a single clear point for test isolation.
_image_stream_store: dict[tuple[str, str], ImageStream] = {}
_rollout_store: dict[tuple[str, str], RealizedDeployment] = {}
_config_store: dict[tuple[str, str], WorkloadConfig] = {}


class InMemoryImageStreamRepository(ImageStreamRepository):
    """In-memory image stream store for testing and demo use."""

    def __init__(self) -> None:
        self._store = _image_stream_store

    async def get(self, namespace: str, name: str) -> ImageStream:
        stream = self._store.get((namespace, name))
        if stream is None:
            raise ImageStreamNotFoundError(f"Image stream {namespace}/{name} not found")
        return stream

    async def save(self, stream: ImageStream) -> ImageStream:
        self._store[(stream.namespace, stream.name)] = stream
        return stream

    async def tag(
        self, namespace: str, name: str, tag: str, image_reference: str, image_id: str = ""
    ) -> ImageStream:
        """Record a new most recent image for a tag, creating the stream if needed."""
        stream = self._store.get((namespace, name)) or ImageStream(namespace=namespace, name=name)
        tags = {key: list(events) for key, events in stream.tags.items()}
        event = TagEvent(image_reference=image_reference, image_id=image_id)
        tags[tag] = [event, *tags.get(tag, [])]
        return await self.save(stream.model_copy(update={"tags": tags}))

    @classmethod
    def clear(cls) -> None:
        """Clear the shared store. Used by test fixtures for isolation."""
        _image_stream_store.clear()


class InMemoryRolloutRepository(RolloutRepository, RolloutCreator):
    """In-memory rollout store that also materializes new rollouts."""

    def __init__(self) -> None:
        self._store = _rollout_store

    async def get_latest(self, namespace: str, config_name: str) -> RealizedDeployment | None:
        rollouts = [
            r for r in self._store.values()
            if r.namespace == namespace and r.config_name == config_name
        ]
        if not rollouts:
            return None
        return max(rollouts, key=lambda r: r.config_version)

    def decode(self, deployment: RealizedDeployment) -> WorkloadConfig:
        return decode_config(deployment.encoded_config)

    async def create(self, config: WorkloadConfig, causes: list[DeploymentCause]) -> str:
        details = config.details or DeploymentDetails(causes=causes)
        deployment = RealizedDeployment.from_config(config.with_changes(details=details))
        key = (deployment.namespace, deployment.name)
        if key in self._store:
            raise RolloutAlreadyExistsError(
                f"Rollout {deployment.namespace}/{deployment.name} already exists"
            )
        self._store[key] = deployment
        return deployment.id

    async def list_for_config(self, namespace: str, config_name: str) -> list[RealizedDeployment]:
        rollouts = [
            r for r in self._store.values()
            if r.namespace == namespace and r.config_name == config_name
        ]
        return sorted(rollouts, key=lambda r: r.config_version)

    @classmethod
    def clear(cls) -> None:
        """Clear the shared store. Used by test fixtures for isolation."""
        _rollout_store.clear()


class InMemoryWorkloadConfigRepository(WorkloadConfigRepository):
    """In-memory workload config store for testing and demo use."""

    def __init__(self) -> None:
        self._store = _config_store

    async def get(self, namespace: str, name: str) -> WorkloadConfig | None:
        return self._store.get((namespace, name))

    async def save(self, config: WorkloadConfig) -> WorkloadConfig:
        self._store[(config.namespace, config.name)] = config
        return config

    @classmethod
    def clear(cls) -> None:
        """Clear the shared store. Used by test fixtures for isolation."""
        _config_store.clear()


class RolloutAlreadyExistsError(Exception):
    """Raised when a rollout for the same config version already exists."""
