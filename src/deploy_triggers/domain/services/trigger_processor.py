"""Image change trigger processing."""

from __future__ import annotations

import structlog

from deploy_triggers.domain.models.trigger import (
    ConfigChangeTrigger,
    ImageChangeParams,
    ImageChangeTrigger,
    ManualTrigger,
    TriggerPolicy,
)
from deploy_triggers.domain.models.workload import Container, PodTemplate, WorkloadConfig
from deploy_triggers.domain.services.image_resolver import ImageTagResolver
from deploy_triggers.infrastructure.observability.metrics import TRIGGER_IMAGE_UPDATES_TOTAL


logger = structlog.get_logger(__name__)


class TriggerProcessor:
    """Resolves image change triggers into the desired pod template.

    The input config is never modified: ``process_triggers`` returns a new
    config carrying the updated container images and the advanced
    ``last_triggered_image`` of every trigger that moved.
    """

    def __init__(self, resolver: ImageTagResolver) -> None:
        self._resolver = resolver

    async def process_triggers(self, config: WorkloadConfig, force: bool = False) -> WorkloadConfig:
        containers = list(config.template.containers)
        triggers: list[TriggerPolicy] = []

        for trigger in config.triggers:
            match trigger:
                case ImageChangeTrigger(image_change_params=params):
                    image = await self._resolve_trigger(config, params, force)
                    if image is not None:
                        containers = self._apply_image(config, containers, params, image)
                        trigger = trigger.model_copy(update={
                            "image_change_params": params.model_copy(
                                update={"last_triggered_image": image}
                            ),
                        })
                        TRIGGER_IMAGE_UPDATES_TOTAL.labels(forced=str(force).lower()).inc()
                case ManualTrigger() | ConfigChangeTrigger():
                    pass
            triggers.append(trigger)

        return config.with_changes(
            template=PodTemplate(containers=containers, labels=dict(config.template.labels)),
            triggers=triggers,
        )

    async def _resolve_trigger(
        self, config: WorkloadConfig, params: ImageChangeParams, force: bool
    ) -> str | None:
        """Return the image to apply for a trigger, or None when it cannot fire."""
        if not params.automatic and not force:
            return None

        reference = params.from_.in_namespace(config.namespace)
        resolved = await self._resolver.resolve(
            reference.namespace, reference.stream_name, reference.tag
        )
        if resolved is None:
            return None

        if resolved.image_reference == params.last_triggered_image and not force:
            return None

        logger.info(
            "image_trigger_resolved",
            config=config.identity,
            stream_tag=reference.name,
            image=resolved.image_reference,
            previous_image=params.last_triggered_image,
            forced=force,
        )
        return resolved.image_reference

    def _apply_image(
        self,
        config: WorkloadConfig,
        containers: list[Container],
        params: ImageChangeParams,
        image: str,
    ) -> list[Container]:
        present = {container.name for container in containers}
        for missing in [name for name in params.container_names if name not in present]:
            logger.warning(
                "trigger_container_missing",
                config=config.identity,
                container=missing,
                stream_tag=params.from_.name,
            )
        return [
            container.model_copy(update={"image": image}) if params.owns(container.name) else container
            for container in containers
        ]
