"""Repository port interfaces (hexagonal architecture)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from deploy_triggers.domain.models.image_stream import ImageStream
from deploy_triggers.domain.models.rollout import RealizedDeployment
from deploy_triggers.domain.models.workload import WorkloadConfig


class ImageStreamRepository(ABC):
    """Port for the image stream store."""

    @abstractmethod
    async def get(self, namespace: str, name: str) -> ImageStream:
        """Retrieve an image stream.

        Raises ImageStreamNotFoundError when the stream does not exist and
        ResolverTransportError when the store itself fails.
        """


class RolloutRepository(ABC):
    """Port for the store of realized deployments."""

    @abstractmethod
    async def get_latest(self, namespace: str, config_name: str) -> RealizedDeployment | None:
        """Get the most recent rollout created for a config."""

    @abstractmethod
    def decode(self, deployment: RealizedDeployment) -> WorkloadConfig:
        """Decode the config snapshot a rollout was created from."""


class WorkloadConfigRepository(ABC):
    """Port for workload config persistence."""

    @abstractmethod
    async def get(self, namespace: str, name: str) -> WorkloadConfig | None:
        """Retrieve a workload config."""

    @abstractmethod
    async def save(self, config: WorkloadConfig) -> WorkloadConfig:
        """Persist a workload config."""


class ImageStreamNotFoundError(Exception):
    """Raised when an image stream does not exist."""


class ResolverTransportError(Exception):
    """Raised when the image stream store fails for any other reason."""
