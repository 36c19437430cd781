"""Domain models package."""

from deploy_triggers.domain.models.base import (
    DomainEvent,
    generate_id,
    utc_now,
    ValueObject,
)
from deploy_triggers.domain.models.image_stream import (
    ImageStream,
    ResolvedImage,
    TagEvent,
)
from deploy_triggers.domain.models.rollout import (
    decode_config,
    encode_config,
    RealizedDeployment,
)
from deploy_triggers.domain.models.trigger import (
    ConfigChangeTrigger,
    DEFAULT_IMAGE_TAG,
    ImageChangeParams,
    ImageChangeTrigger,
    ImageStreamTagReference,
    join_image_stream_tag,
    ManualTrigger,
    TriggerPolicy,
    TriggerType,
)
from deploy_triggers.domain.models.workload import (
    Container,
    DeploymentCause,
    DeploymentCauseImageTrigger,
    DeploymentDetails,
    PodTemplate,
    rollout_name_for,
    TriggerDecision,
    WorkloadConfig,
)


__all__ = [
    "ConfigChangeTrigger",
    "Container",
    "DEFAULT_IMAGE_TAG",
    "DeploymentCause",
    "DeploymentCauseImageTrigger",
    "DeploymentDetails",
    "DomainEvent",
    "ImageChangeParams",
    "ImageChangeTrigger",
    "ImageStream",
    "ImageStreamTagReference",
    "ManualTrigger",
    "PodTemplate",
    "RealizedDeployment",
    "ResolvedImage",
    "TagEvent",
    "TriggerDecision",
    "TriggerPolicy",
    "TriggerType",
    "ValueObject",
    "WorkloadConfig",
    "decode_config",
    "encode_config",
    "generate_id",
    "join_image_stream_tag",
    "rollout_name_for",
    "utc_now",
]
