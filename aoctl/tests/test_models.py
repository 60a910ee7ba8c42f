from aoctl.modules.models import (
    NO_VALUE,
    DeployResult,
    DeploymentSpec,
    DestinationKey,
    Partition,
    split_application_id,
)

SPEC_ITEM = {
    "cluster": {"value": "east", "source": "about.json"},
    "envName": {"value": "dev", "source": "dev/about.json"},
    "name": {"value": "flubber", "source": "dev/flubber.json"},
    "namespace": "paas-dev",
    "version": {"value": "1", "source": "flubber.json"},
    "management": {"path": {"value": "actuator"}},
    "resources": {"cpu": {"max": "200m"}},
}


def test_spec_from_api_unwraps_values():
    spec = DeploymentSpec.from_api(SPEC_ITEM)

    assert spec.cluster == "east"
    assert spec.environment == "dev"
    assert spec.name == "flubber"
    assert spec.namespace == "paas-dev"
    assert spec.version == "1"
    assert spec.application_id == "dev/flubber"
    assert spec.destination == DestinationKey("east", "paas-dev")


def test_spec_get_reads_nested_fields():
    spec = DeploymentSpec.from_api(SPEC_ITEM)

    assert spec.get("cluster") == "east"
    assert spec.get("/cluster") == "east"
    assert spec.get("/management/path") == "actuator"
    assert spec.get("/resources/cpu/max") == "200m"


def test_spec_get_missing_field():
    spec = DeploymentSpec.from_api(SPEC_ITEM)
    assert spec.get("doesnotexist") == NO_VALUE
    assert spec.get("/resources/memory/max") == NO_VALUE


def test_namespace_defaults_to_environment():
    spec = DeploymentSpec(cluster="east", environment="dev", name="foo")
    assert spec.namespace == "dev"


def test_split_application_id():
    assert split_application_id("dev/foo") == ("dev", "foo")
    assert split_application_id("foo") == ("", "foo")


def test_deploy_result_from_item_falls_back_to_partition():
    partition = Partition(
        key=DestinationKey("east", "dev"),
        cluster=None,
    )
    result = DeployResult.from_deploy_item(
        {"success": False, "reason": "quota", "applicationDeploymentSpec": {"name": "foo"}},
        partition,
    )
    assert result == DeployResult(
        success=False, name="foo", namespace="dev", cluster="east", reason="quota", deploy_id=NO_VALUE
    )
