"""Change detection: decides whether a config warrants a new rollout."""

from __future__ import annotations

import structlog

from deploy_triggers.domain.models.trigger import ImageChangeParams, TriggerType
from deploy_triggers.domain.models.workload import (
    DeploymentCause,
    DeploymentCauseImageTrigger,
    TriggerDecision,
    WorkloadConfig,
)


logger = structlog.get_logger(__name__)


def can_trigger(
    config: WorkloadConfig, decoded: WorkloadConfig | None, force: bool = False
) -> TriggerDecision:
    """Decide whether ``config`` should be rolled out and why.

    ``config`` is the desired state after trigger processing and ``decoded``
    the config snapshot of the latest rollout (``None`` when the config has
    never been deployed). Rules are evaluated in order and the first one that
    applies decides:

    1. a forced pass always deploys with a single manual cause;
    2. a config without trigger policies never deploys;
    3. image change triggers fire when their resolved image moved since the
       latest rollout; unresolved triggers and images that moved without
       their trigger recording it raise ``PolicyConflictError``;
    4. image change causes suppress the config change cause;
    5. a config change trigger fires on the initial rollout or when the pod
       template differs from the latest rollout.

    Causes follow the order of the trigger policies.
    """
    if force:
        return _decided(config, [DeploymentCause(type=TriggerType.MANUAL)])

    if not config.triggers:
        return _decided(config, [])

    baseline = None if config.is_initial else decoded
    image_causes: list[DeploymentCause] = []
    for params in config.image_change_params:
        cause = _evaluate_image_change(config, baseline, params)
        if cause is not None:
            image_causes.append(cause)

    if image_causes:
        return _decided(config, image_causes)

    template_changed = baseline is None or config.template != baseline.template
    if config.has_config_change_trigger and template_changed:
        return _decided(config, [DeploymentCause(type=TriggerType.CONFIG_CHANGE)])

    return _decided(config, [])


def _evaluate_image_change(
    config: WorkloadConfig, baseline: WorkloadConfig | None, params: ImageChangeParams
) -> DeploymentCause | None:
    """Evaluate one image change trigger against the latest rollout."""
    missing = [name for name in params.container_names if config.template.container(name) is None]
    if missing:
        logger.warning(
            "trigger_container_missing",
            config=config.identity,
            containers=missing,
            stream_tag=params.from_.name,
        )
        return None

    if not params.is_resolved:
        raise PolicyConflictError(
            config.identity,
            f"image change trigger for {params.from_.name} contains unresolved images",
        )

    previous = baseline.find_image_change_params(params.from_) if baseline is not None else None

    if baseline is not None and previous is not None:
        images_moved = (
            config.template.images_for(params.container_names)
            != baseline.template.images_for(params.container_names)
        )
        if images_moved and previous.last_triggered_image == params.last_triggered_image:
            raise PolicyConflictError(
                config.identity,
                f"containers {params.container_names} changed image without "
                f"image change trigger {params.from_.name} recording it",
            )

    # Non-automatic triggers only move under a forced pass.
    if not params.automatic:
        return None

    if previous is not None and previous.last_triggered_image == params.last_triggered_image:
        return None

    return DeploymentCause(
        type=TriggerType.IMAGE_CHANGE,
        image_trigger=DeploymentCauseImageTrigger(
            from_=params.from_,
            image=params.last_triggered_image,
        ),
    )


def _decided(config: WorkloadConfig, causes: list[DeploymentCause]) -> TriggerDecision:
    decision = TriggerDecision(should_deploy=bool(causes), causes=causes)
    logger.debug(
        "trigger_decision",
        config=config.identity,
        should_deploy=decision.should_deploy,
        causes=[cause.type.value for cause in causes],
    )
    return decision


class PolicyConflictError(Exception):
    """Raised when the trigger bookkeeping cannot explain a template change."""

    def __init__(self, config_name: str, reason: str) -> None:
        super().__init__(f"cannot trigger a deployment for {config_name!r}: {reason}")
        self.config_name = config_name
        self.reason = reason
