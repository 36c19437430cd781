"""Trigger policy domain models."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import Field, field_validator

from deploy_triggers.domain.models.base import ValueObject


DEFAULT_IMAGE_TAG = "latest"


class TriggerType(str, Enum):
    """Kinds of trigger policies and deployment causes."""

    MANUAL = "Manual"
    CONFIG_CHANGE = "ConfigChange"
    IMAGE_CHANGE = "ImageChange"


def join_image_stream_tag(stream_name: str, tag: str) -> str:
    """Render a stream name and tag as ``stream:tag``."""
    if not tag:
        tag = DEFAULT_IMAGE_TAG
    return f"{stream_name}:{tag}"


class ImageStreamTagReference(ValueObject):
    """Upstream reference of an image change trigger."""

    namespace: str = ""
    stream_name: str = Field(..., min_length=1)
    tag: str = DEFAULT_IMAGE_TAG

    @property
    def name(self) -> str:
        return join_image_stream_tag(self.stream_name, self.tag)

    def in_namespace(self, default_namespace: str) -> ImageStreamTagReference:
        """Return this reference with an empty namespace filled in."""
        if self.namespace:
            return self
        return self.model_copy(update={"namespace": default_namespace})


class ImageChangeParams(ValueObject):
    """Parameters of an image change trigger."""

    automatic: bool = False
    container_names: list[str] = Field(default_factory=list)
    from_: ImageStreamTagReference = Field(alias="from")
    last_triggered_image: str = ""

    @field_validator("container_names")
    @classmethod
    def _dedupe_container_names(cls, names: list[str]) -> list[str]:
        return list(dict.fromkeys(names))

    @property
    def is_resolved(self) -> bool:
        return bool(self.last_triggered_image)

    def owns(self, container_name: str) -> bool:
        return container_name in self.container_names


class ManualTrigger(ValueObject):
    type: Literal["Manual"] = "Manual"


class ConfigChangeTrigger(ValueObject):
    type: Literal["ConfigChange"] = "ConfigChange"


class ImageChangeTrigger(ValueObject):
    type: Literal["ImageChange"] = "ImageChange"
    image_change_params: ImageChangeParams


TriggerPolicy = Annotated[
    ManualTrigger | ConfigChangeTrigger | ImageChangeTrigger,
    Field(discriminator="type"),
]
