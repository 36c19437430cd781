"""Workload configuration and deployment cause models."""

from __future__ import annotations

from pydantic import Field

from deploy_triggers.domain.models.base import ValueObject
from deploy_triggers.domain.models.trigger import (
    ConfigChangeTrigger,
    ImageChangeParams,
    ImageChangeTrigger,
    ImageStreamTagReference,
    TriggerPolicy,
    TriggerType,
)


class Container(ValueObject):
    """A named container in a pod template."""

    name: str = Field(..., min_length=1)
    image: str = ""


class PodTemplate(ValueObject):
    """Desired pod template. Compared field-wise, never by identity."""

    containers: list[Container] = Field(default_factory=list)
    labels: dict[str, str] = Field(default_factory=dict)

    def container(self, name: str) -> Container | None:
        for container in self.containers:
            if container.name == name:
                return container
        return None

    def images_for(self, container_names: list[str]) -> dict[str, str]:
        """Map owned container names present in the template to their images."""
        images: dict[str, str] = {}
        for name in container_names:
            container = self.container(name)
            if container is not None:
                images[name] = container.image
        return images


class DeploymentCauseImageTrigger(ValueObject):
    """The image change that caused a rollout."""

    from_: ImageStreamTagReference = Field(alias="from")
    image: str = ""


class DeploymentCause(ValueObject):
    """Audit record explaining why a rollout was created."""

    type: TriggerType
    image_trigger: DeploymentCauseImageTrigger | None = None


class DeploymentDetails(ValueObject):
    """Recorded trigger reason of a rollout."""

    message: str = ""
    causes: list[DeploymentCause] = Field(default_factory=list)


class TriggerDecision(ValueObject):
    """Outcome of a change detection pass."""

    should_deploy: bool = False
    causes: list[DeploymentCause] = Field(default_factory=list)


class WorkloadConfig(ValueObject):
    """Desired state of a workload: template, trigger policies and version."""

    namespace: str = "default"
    name: str = Field(..., min_length=1)
    triggers: list[TriggerPolicy] = Field(default_factory=list)
    template: PodTemplate = Field(default_factory=PodTemplate)
    version: int = Field(default=0, ge=0)
    details: DeploymentDetails | None = None

    @property
    def identity(self) -> str:
        return f"{self.namespace}/{self.name}"

    @property
    def is_initial(self) -> bool:
        """True when no rollout has ever been created for this config."""
        return self.version == 0

    @property
    def latest_rollout_name(self) -> str:
        return rollout_name_for(self.name, self.version)

    @property
    def image_change_params(self) -> list[ImageChangeParams]:
        """Image change trigger parameters in policy order."""
        return [
            trigger.image_change_params
            for trigger in self.triggers
            if isinstance(trigger, ImageChangeTrigger)
        ]

    @property
    def has_config_change_trigger(self) -> bool:
        return any(isinstance(trigger, ConfigChangeTrigger) for trigger in self.triggers)

    def find_image_change_params(
        self, reference: ImageStreamTagReference
    ) -> ImageChangeParams | None:
        """Find the image change trigger following the given upstream reference."""
        target = reference.in_namespace(self.namespace)
        for params in self.image_change_params:
            if params.from_.in_namespace(self.namespace) == target:
                return params
        return None

    def with_changes(
        self,
        *,
        template: PodTemplate | None = None,
        triggers: list[TriggerPolicy] | None = None,
        version: int | None = None,
        details: DeploymentDetails | None = None,
    ) -> WorkloadConfig:
        """Return a copy of this config with the given fields replaced."""
        update: dict[str, object] = {}
        if template is not None:
            update["template"] = template
        if triggers is not None:
            update["triggers"] = triggers
        if version is not None:
            update["version"] = version
        if details is not None:
            update["details"] = details
        return self.model_copy(update=update, deep=True)


def rollout_name_for(config_name: str, version: int) -> str:
    """Name of the rollout created for a config at a given version."""
    return f"{config_name}-{version}"
