"""Reconciliation entry point: process triggers, detect changes, roll out."""

from __future__ import annotations

import structlog

from deploy_triggers.domain.events.rollout_events import (
    RolloutConflictDetected,
    RolloutTriggered,
)
from deploy_triggers.domain.models.base import DomainEvent, generate_id, ValueObject
from deploy_triggers.domain.models.trigger import TriggerType
from deploy_triggers.domain.models.workload import (
    DeploymentCause,
    DeploymentDetails,
    TriggerDecision,
    WorkloadConfig,
)
from deploy_triggers.domain.ports.repositories import (
    RolloutRepository,
    WorkloadConfigRepository,
)
from deploy_triggers.domain.ports.services import EventPublisher, RolloutCreator
from deploy_triggers.domain.services.change_detector import can_trigger, PolicyConflictError
from deploy_triggers.domain.services.trigger_processor import TriggerProcessor
from deploy_triggers.infrastructure.observability.metrics import (
    RECONCILE_PASSES_TOTAL,
    ROLLOUTS_TRIGGERED_TOTAL,
)
from deploy_triggers.infrastructure.observability.tracing import get_tracer


logger = structlog.get_logger(__name__)

CAUSE_MESSAGES: dict[TriggerType, str] = {
    TriggerType.MANUAL: "manual change",
    TriggerType.CONFIG_CHANGE: "config change",
    TriggerType.IMAGE_CHANGE: "image change",
}


class ReconcileResult(ValueObject):
    """Outcome of a reconciliation pass."""

    config: WorkloadConfig
    decision: TriggerDecision
    rollout_id: str | None = None

    @property
    def rolled_out(self) -> bool:
        return self.rollout_id is not None


class ReconciliationService:
    """Domain service composing trigger processing and change detection.

    A pass either creates exactly one rollout with an accurate cause list or
    changes nothing. Errors from the image stream store, the rollout store
    or change detection are propagated unchanged and no rollout is created.
    """

    def __init__(
        self,
        trigger_processor: TriggerProcessor,
        rollout_repo: RolloutRepository,
        rollout_creator: RolloutCreator,
        event_publisher: EventPublisher,
        config_repo: WorkloadConfigRepository | None = None,
    ) -> None:
        self._trigger_processor = trigger_processor
        self._rollout_repo = rollout_repo
        self._rollout_creator = rollout_creator
        self._event_publisher = event_publisher
        self._config_repo = config_repo

    async def _publish(self, event: DomainEvent) -> None:
        await self._event_publisher.publish(event.event_type, event.model_dump(mode="json"))

    async def _load_decoded(self, config: WorkloadConfig) -> WorkloadConfig | None:
        """Decode the config snapshot of the latest rollout, if any.

        Only an undeployed config has no baseline; a deployed config whose
        latest rollout is gone cannot be compared and fails the pass.
        """
        if config.is_initial:
            return None
        latest = await self._rollout_repo.get_latest(config.namespace, config.name)
        if latest is None:
            raise LatestRolloutNotFoundError(
                f"Rollout {config.namespace}/{config.latest_rollout_name} not found: "
                "no basis of comparison for a deployed config"
            )
        return self._rollout_repo.decode(latest)

    async def reconcile(
        self, config: WorkloadConfig, force: bool = False, latest: bool = True
    ) -> ReconcileResult:
        """Run one reconciliation pass over a copy of ``config``."""
        with get_tracer().start_as_current_span("reconcile") as span:
            span.set_attribute("workload.identity", config.identity)
            span.set_attribute("reconcile.force", force)
            try:
                result = await self._reconcile(config, force, latest)
            except PolicyConflictError as e:
                RECONCILE_PASSES_TOTAL.labels(result="conflict").inc()
                logger.warning("reconcile_conflict", config=config.identity, reason=e.reason)
                await self._publish(RolloutConflictDetected(
                    namespace=config.namespace,
                    config_name=config.name,
                    reason=e.reason,
                    correlation_id=_correlation_id(),
                ))
                raise
            except Exception:
                RECONCILE_PASSES_TOTAL.labels(result="error").inc()
                logger.exception("reconcile_failed", config=config.identity)
                raise

            span.set_attribute("reconcile.rolled_out", result.rolled_out)
            RECONCILE_PASSES_TOTAL.labels(
                result="rollout_created" if result.rolled_out else "no_change"
            ).inc()
            return result

    async def _reconcile(
        self, config: WorkloadConfig, force: bool, latest: bool
    ) -> ReconcileResult:
        if latest or force:
            config = await self._trigger_processor.process_triggers(config, force)

        decoded = await self._load_decoded(config)
        decision = can_trigger(config, decoded, force)
        if not decision.should_deploy:
            logger.info("reconcile_no_change", config=config.identity, version=config.version)
            return ReconcileResult(config=config, decision=decision)

        config = config.with_changes(
            version=config.version + 1,
            details=DeploymentDetails(
                message=describe_causes(decision.causes),
                causes=decision.causes,
            ),
        )
        rollout_id = await self._rollout_creator.create(config, decision.causes)

        for cause in decision.causes:
            ROLLOUTS_TRIGGERED_TOTAL.labels(cause=cause.type.value).inc()
        await self._publish(RolloutTriggered(
            namespace=config.namespace,
            config_name=config.name,
            version=config.version,
            rollout_id=rollout_id,
            causes=decision.causes,
            correlation_id=_correlation_id(),
        ))

        logger.info(
            "rollout_created",
            config=config.identity,
            version=config.version,
            rollout_id=rollout_id,
            causes=[cause.type.value for cause in decision.causes],
        )
        return ReconcileResult(config=config, decision=decision, rollout_id=rollout_id)

    async def instantiate(
        self, namespace: str, name: str, force: bool = False, latest: bool = True
    ) -> ReconcileResult:
        """Reconcile a stored config and persist it when a rollout was created."""
        if self._config_repo is None:
            raise WorkloadConfigNotFoundError(f"No config store to load {namespace}/{name}")

        config = await self._config_repo.get(namespace, name)
        if config is None:
            raise WorkloadConfigNotFoundError(f"Workload config {namespace}/{name} not found")

        result = await self.reconcile(config, force=force, latest=latest)
        if result.rolled_out:
            await self._config_repo.save(result.config)
        return result


def _correlation_id() -> str:
    """Correlation ID bound to the current log context, or a fresh one."""
    return structlog.contextvars.get_contextvars().get("correlation_id") or generate_id()


def describe_causes(causes: list[DeploymentCause]) -> str:
    """Human readable summary of rollout causes, e.g. ``image change``."""
    messages = list(dict.fromkeys(CAUSE_MESSAGES[cause.type] for cause in causes))
    return ", ".join(messages)


class WorkloadConfigNotFoundError(Exception):
    """Raised when a workload config is not found."""


class LatestRolloutNotFoundError(Exception):
    """Raised when a deployed config has no rollout to compare against."""
