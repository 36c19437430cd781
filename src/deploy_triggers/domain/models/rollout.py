"""Realized deployment (rollout) models."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from deploy_triggers.domain.models.base import generate_id, utc_now, ValueObject
from deploy_triggers.domain.models.workload import (
    DeploymentDetails,
    rollout_name_for,
    WorkloadConfig,
)


class RealizedDeployment(ValueObject):
    """The last rollout created for a workload config.

    Carries an encoded snapshot of the config that produced it so the
    baseline for change detection can be decoded back.
    """

    id: str = Field(default_factory=generate_id)
    namespace: str
    name: str
    config_name: str
    config_version: int
    encoded_config: str
    details: DeploymentDetails | None = None
    created_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def from_config(cls, config: WorkloadConfig) -> RealizedDeployment:
        return cls(
            namespace=config.namespace,
            name=rollout_name_for(config.name, config.version),
            config_name=config.name,
            config_version=config.version,
            encoded_config=encode_config(config),
            details=config.details,
        )


def encode_config(config: WorkloadConfig) -> str:
    return config.model_dump_json()


def decode_config(encoded: str) -> WorkloadConfig:
    return WorkloadConfig.model_validate_json(encoded)
