"""Unit tests for change detection."""

from __future__ import annotations

import pytest

from deploy_triggers.domain.models.trigger import (
    ConfigChangeTrigger,
    ImageChangeParams,
    ImageChangeTrigger,
    ImageStreamTagReference,
    ManualTrigger,
    TriggerPolicy,
    TriggerType,
)
from deploy_triggers.domain.models.workload import (
    Container,
    DeploymentCause,
    DeploymentCauseImageTrigger,
    PodTemplate,
    WorkloadConfig,
)
from deploy_triggers.domain.services.change_detector import can_trigger, PolicyConflictError


IMAGE_STREAM_NAME = "test-image-stream"
DOCKER_IMAGE_REFERENCE = f"registry:5000/openshift/{IMAGE_STREAM_NAME}@sha256:0001"
STREAM_TAG = ImageStreamTagReference(stream_name=IMAGE_STREAM_NAME, tag="latest")


def _template(image: str = "registry:8080/repo1:ref1") -> PodTemplate:
    return PodTemplate(containers=[
        Container(name="container1", image=image),
        Container(name="container2", image="registry:8080/repo1:ref2"),
    ])


def _template_changed() -> PodTemplate:
    return _template(DOCKER_IMAGE_REFERENCE)


def _image_trigger(
    automatic: bool = True,
    last_triggered_image: str = "",
    stream_tag: ImageStreamTagReference = STREAM_TAG,
    container_names: list[str] | None = None,
) -> ImageChangeTrigger:
    return ImageChangeTrigger(image_change_params=ImageChangeParams(
        automatic=automatic,
        container_names=container_names or ["container1"],
        from_=stream_tag,
        last_triggered_image=last_triggered_image,
    ))


def _image_change_trigger() -> ImageChangeTrigger:
    return _image_trigger(automatic=True)


def _triggered_image_change() -> ImageChangeTrigger:
    return _image_trigger(automatic=True, last_triggered_image=DOCKER_IMAGE_REFERENCE)


def _non_automatic() -> ImageChangeTrigger:
    return _image_trigger(automatic=False)


def _triggered_non_automatic() -> ImageChangeTrigger:
    return _image_trigger(automatic=False, last_triggered_image=DOCKER_IMAGE_REFERENCE)


def _config(
    template: PodTemplate, triggers: list[TriggerPolicy], version: int = 1,
) -> WorkloadConfig:
    return WorkloadConfig(name="config", template=template, triggers=triggers, version=version)


CONFIG_CHANGE_CAUSES = [DeploymentCause(type=TriggerType.CONFIG_CHANGE)]
IMAGE_CHANGE_CAUSES = [
    DeploymentCause(
        type=TriggerType.IMAGE_CHANGE,
        image_trigger=DeploymentCauseImageTrigger(from_=STREAM_TAG, image=DOCKER_IMAGE_REFERENCE),
    ),
]

SCENARIOS = [
    pytest.param(
        _config(_template_changed(), []),
        _config(_template(), []),
        False, False, [], False,
        id="no trigger [w/ podtemplate change]",
    ),
    pytest.param(
        _config(_template_changed(), []),
        _config(_template(), []),
        True, True, [DeploymentCause(type=TriggerType.MANUAL)], False,
        id="forced update",
    ),
    pytest.param(
        _config(_template_changed(), [ConfigChangeTrigger()]),
        _config(_template(), [ConfigChangeTrigger()]),
        False, True, CONFIG_CHANGE_CAUSES, False,
        id="config change trigger only [w/ podtemplate change]",
    ),
    pytest.param(
        _config(_template(), [ConfigChangeTrigger()], version=0),
        None,
        False, True, CONFIG_CHANGE_CAUSES, False,
        id="config change trigger only [no change][initial]",
    ),
    pytest.param(
        _config(_template(), [ConfigChangeTrigger()]),
        _config(_template(), [ConfigChangeTrigger()]),
        False, False, [], False,
        id="config change trigger only [no change]",
    ),
    pytest.param(
        _config(_template_changed(), [_non_automatic()]),
        _config(_template(), [_non_automatic()]),
        False, False, [], True,
        id="image change trigger only [automatic=false][w/ podtemplate change]",
    ),
    pytest.param(
        _config(_template_changed(), [_triggered_non_automatic()]),
        _config(_template(), [_non_automatic()]),
        False, False, [], False,
        id="image change trigger only [automatic=false][w/ image change]",
    ),
    pytest.param(
        _config(_template_changed(), [_triggered_image_change()]),
        _config(_template(), [_image_change_trigger()]),
        False, True, IMAGE_CHANGE_CAUSES, False,
        id="image change trigger only [automatic=true][w/ image change]",
    ),
    pytest.param(
        _config(_template_changed(), [_triggered_image_change()]),
        _config(_template_changed(), [_triggered_image_change()]),
        False, False, [], False,
        id="image change trigger only [automatic=true][no change]",
    ),
    pytest.param(
        _config(_template_changed(), [ConfigChangeTrigger(), _triggered_non_automatic()], version=0),
        None,
        False, True, CONFIG_CHANGE_CAUSES, False,
        id="config change and image change trigger [automatic=false][initial][w/ image change]",
    ),
    pytest.param(
        _config(_template(), [ConfigChangeTrigger(), _non_automatic()], version=0),
        None,
        False, False, [], True,
        id="config change and image change trigger [automatic=false][initial][no change]",
    ),
    pytest.param(
        _config(_template_changed(), [ConfigChangeTrigger(), _image_change_trigger()], version=0),
        None,
        False, False, [], True,
        id="config change and image change trigger [automatic=true][initial][w/ podtemplate change]",
    ),
    pytest.param(
        _config(_template_changed(), [ConfigChangeTrigger(), _triggered_image_change()], version=0),
        None,
        False, True, IMAGE_CHANGE_CAUSES, False,
        id="config change and image change trigger [automatic=true][initial][w/ image change]",
    ),
    pytest.param(
        _config(_template_changed(), [ConfigChangeTrigger(), _triggered_image_change()]),
        _config(_template_changed(), [ConfigChangeTrigger(), _triggered_image_change()]),
        False, False, [], False,
        id="config change and image change trigger [automatic=true][no change]",
    ),
]


class TestCanTriggerScenarios:
    @pytest.mark.parametrize(
        ("config", "decoded", "force", "expected", "expected_causes", "expected_err"),
        SCENARIOS,
    )
    def test_scenario(
        self,
        config: WorkloadConfig,
        decoded: WorkloadConfig | None,
        force: bool,
        expected: bool,
        expected_causes: list[DeploymentCause],
        expected_err: bool,
    ) -> None:
        if expected_err:
            with pytest.raises(PolicyConflictError):
                can_trigger(config, decoded, force)
            return

        decision = can_trigger(config, decoded, force)
        assert decision.should_deploy is expected
        assert decision.causes == expected_causes


class TestForcedBypass:
    @pytest.mark.parametrize("decoded", [
        None,
        _config(_template(), [_image_change_trigger()]),
        _config(_template("registry:8080/repo1:elsewhere"), [_triggered_image_change()]),
    ])
    def test_forced_always_deploys_manually(self, decoded: WorkloadConfig | None) -> None:
        config = _config(_template_changed(), [ConfigChangeTrigger(), _triggered_image_change()])
        decision = can_trigger(config, decoded, force=True)
        assert decision.should_deploy is True
        assert decision.causes == [DeploymentCause(type=TriggerType.MANUAL)]

    def test_forced_ignores_unresolved_trigger(self) -> None:
        config = _config(_template(), [_non_automatic()], version=0)
        decision = can_trigger(config, None, force=True)
        assert decision.should_deploy is True


class TestNoTriggerFloor:
    def test_initial_without_triggers_never_deploys(self) -> None:
        decision = can_trigger(_config(_template_changed(), [], version=0), None)
        assert decision.should_deploy is False
        assert decision.causes == []

    def test_manual_trigger_alone_never_deploys(self) -> None:
        config = _config(_template_changed(), [ManualTrigger()])
        decoded = _config(_template(), [ManualTrigger()])
        assert can_trigger(config, decoded).should_deploy is False


class TestConfigChange:
    def test_initial_fires_even_without_decoded_baseline(self) -> None:
        config = _config(_template(), [ConfigChangeTrigger()], version=0)
        # A baseline passed for an initial config is ignored.
        decision = can_trigger(config, _config(_template(), [ConfigChangeTrigger()], version=0))
        assert decision.causes == CONFIG_CHANGE_CAUSES

    def test_label_change_is_a_template_change(self) -> None:
        template = _template().model_copy(update={"labels": {"tier": "web"}})
        config = _config(template, [ConfigChangeTrigger()])
        decoded = _config(_template(), [ConfigChangeTrigger()])
        assert can_trigger(config, decoded).causes == CONFIG_CHANGE_CAUSES

    def test_structurally_equal_templates_do_not_fire(self) -> None:
        config = _config(_template(), [ConfigChangeTrigger()])
        decoded = _config(_template(), [ConfigChangeTrigger()])
        assert config.template is not decoded.template
        assert can_trigger(config, decoded).should_deploy is False


class TestImageChange:
    def test_image_change_suppresses_config_change(self) -> None:
        config = _config(_template_changed(), [ConfigChangeTrigger(), _triggered_image_change()])
        decoded = _config(_template(), [ConfigChangeTrigger(), _image_change_trigger()])
        decision = can_trigger(config, decoded)
        assert decision.should_deploy is True
        assert [c.type for c in decision.causes] == [TriggerType.IMAGE_CHANGE]

    def test_divergent_image_without_trigger_update_conflicts(self) -> None:
        config = _config(
            _template("registry:8080/repo1:hand-edited"),
            [ConfigChangeTrigger(), _triggered_image_change()],
        )
        decoded = _config(_template_changed(), [ConfigChangeTrigger(), _triggered_image_change()])
        with pytest.raises(PolicyConflictError) as exc_info:
            can_trigger(config, decoded)
        assert exc_info.value.config_name == "default/config"

    def test_unowned_container_change_falls_back_to_config_change(self) -> None:
        template = _template_changed().model_copy(update={"containers": [
            Container(name="container1", image=DOCKER_IMAGE_REFERENCE),
            Container(name="container2", image="registry:8080/repo1:ref3"),
        ]})
        config = _config(template, [ConfigChangeTrigger(), _triggered_image_change()])
        decoded = _config(_template_changed(), [ConfigChangeTrigger(), _triggered_image_change()])
        assert can_trigger(config, decoded).causes == CONFIG_CHANGE_CAUSES

    def test_multiple_image_causes_follow_policy_order(self) -> None:
        other_tag = ImageStreamTagReference(stream_name="sidecar", tag="stable")
        sidecar_image = "registry:5000/openshift/sidecar@sha256:0002"
        config = _config(_template(), [
            _image_trigger(
                last_triggered_image=sidecar_image,
                stream_tag=other_tag,
                container_names=["container2"],
            ),
            ConfigChangeTrigger(),
            _triggered_image_change(),
        ], version=0)

        decision = can_trigger(config, None)

        assert decision.should_deploy is True
        assert [c.image_trigger.from_ for c in decision.causes if c.image_trigger] == [
            other_tag, STREAM_TAG,
        ]
        assert [c.image_trigger.image for c in decision.causes if c.image_trigger] == [
            sidecar_image, DOCKER_IMAGE_REFERENCE,
        ]

    def test_trigger_new_since_latest_rollout_fires(self) -> None:
        config = _config(_template_changed(), [ConfigChangeTrigger(), _triggered_image_change()])
        decoded = _config(_template(), [ConfigChangeTrigger()])
        assert can_trigger(config, decoded).causes == IMAGE_CHANGE_CAUSES

    def test_missing_container_contributes_no_cause(self) -> None:
        config = _config(_template(), [
            _image_trigger(
                last_triggered_image=DOCKER_IMAGE_REFERENCE,
                container_names=["missing-container"],
            ),
        ], version=0)
        decision = can_trigger(config, None)
        assert decision.should_deploy is False
        assert decision.causes == []

    def test_decision_is_pure(self) -> None:
        config = _config(_template_changed(), [_triggered_image_change()])
        decoded = _config(_template(), [_image_change_trigger()])
        before = (config.model_dump(), decoded.model_dump())
        can_trigger(config, decoded)
        can_trigger(config, decoded)
        assert (config.model_dump(), decoded.model_dump()) == before
