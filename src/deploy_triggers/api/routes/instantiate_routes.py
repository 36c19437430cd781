"""Deployment config instantiate routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from deploy_triggers.api.dependencies.services import get_service_container, ServiceContainer
from deploy_triggers.api.middleware.correlation import get_correlation_id
from deploy_triggers.api.schemas.instantiate_schemas import (
    CauseResponse,
    ImageTriggerResponse,
    InstantiateRequest,
    InstantiateResponse,
)
from deploy_triggers.domain.models.workload import DeploymentCause, WorkloadConfig
from deploy_triggers.domain.ports.repositories import ResolverTransportError
from deploy_triggers.domain.services.change_detector import PolicyConflictError
from deploy_triggers.domain.services.reconciliation_service import (
    LatestRolloutNotFoundError,
    ReconcileResult,
    WorkloadConfigNotFoundError,
)
from deploy_triggers.infrastructure.observability.logging import bind_reconcile_context
from deploy_triggers.infrastructure.persistence.repositories.in_memory import (
    RolloutAlreadyExistsError,
)


router = APIRouter(prefix="/namespaces/{namespace}/deploymentconfigs", tags=["deploymentconfigs"])


def _cause_response(cause: DeploymentCause) -> CauseResponse:
    image_trigger = None
    if cause.image_trigger is not None:
        image_trigger = ImageTriggerResponse(
            namespace=cause.image_trigger.from_.namespace,
            name=cause.image_trigger.from_.name,
            image=cause.image_trigger.image,
        )
    return CauseResponse(type=cause.type, image_trigger=image_trigger)


def _to_response(result: ReconcileResult) -> InstantiateResponse:
    """Map a reconciliation result to an API response."""
    config = result.config
    return InstantiateResponse(
        namespace=config.namespace,
        name=config.name,
        version=config.version,
        rolled_out=result.rolled_out,
        rollout_id=result.rollout_id,
        message=config.details.message if result.rolled_out and config.details else "",
        causes=[_cause_response(c) for c in result.decision.causes],
    )


@router.get("/{name}", response_model=WorkloadConfig)
async def get_config(
    namespace: str,
    name: str,
    container: Annotated[ServiceContainer, Depends(get_service_container)],
) -> WorkloadConfig:
    """Get a stored workload config."""
    config = await container.config_repo.get(namespace, name)
    if config is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Workload config {namespace}/{name} not found",
        )
    return config


@router.post("/{name}/instantiate", response_model=InstantiateResponse)
async def instantiate(
    namespace: str,
    name: str,
    request: InstantiateRequest,
    container: Annotated[ServiceContainer, Depends(get_service_container)],
) -> InstantiateResponse:
    """Run a reconciliation pass for a config and create a rollout if warranted."""
    service = container.reconciliation_service
    try:
        with bind_reconcile_context(namespace, name, get_correlation_id()):
            result = await service.instantiate(
                namespace, name, force=request.force, latest=request.latest,
            )
    except WorkloadConfigNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except (PolicyConflictError, LatestRolloutNotFoundError, RolloutAlreadyExistsError) as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except ResolverTransportError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e
    return _to_response(result)
