"""Prometheus metrics configuration."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Info,
)


# Application info
APP_INFO = Info("deploy_triggers", "Deployment trigger engine info")
APP_INFO.info({
    "version": "1.0.0",
    "service": "deploy-triggers",
})

# Reconciliation metrics
RECONCILE_PASSES_TOTAL = Counter(
    "deploy_triggers_reconcile_passes_total",
    "Total number of reconciliation passes",
    ["result"],  # "rollout_created", "no_change", "conflict", "error"
)

ROLLOUTS_TRIGGERED_TOTAL = Counter(
    "deploy_triggers_rollouts_triggered_total",
    "Total number of rollouts created, by cause",
    ["cause"],
)

# Resolver metrics
IMAGE_RESOLUTIONS_TOTAL = Counter(
    "deploy_triggers_image_resolutions_total",
    "Total image stream tag resolutions",
    ["result"],  # "resolved", "stream_not_found", "tag_not_found"
)

TRIGGER_IMAGE_UPDATES_TOTAL = Counter(
    "deploy_triggers_trigger_image_updates_total",
    "Total image change triggers that updated the pod template",
    ["forced"],
)
