"""API schemas for instantiate endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from deploy_triggers.domain.models.trigger import TriggerType


class InstantiateRequest(BaseModel):
    latest: bool = True
    force: bool = False


class ImageTriggerResponse(BaseModel):
    namespace: str = ""
    name: str
    image: str = ""


class CauseResponse(BaseModel):
    type: TriggerType
    image_trigger: ImageTriggerResponse | None = None


class InstantiateResponse(BaseModel):
    namespace: str
    name: str
    version: int
    rolled_out: bool
    rollout_id: str | None = None
    message: str = ""
    causes: list[CauseResponse] = Field(default_factory=list)
