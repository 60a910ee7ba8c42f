import threading

import pytest

from aoctl.errors import TransportError
from aoctl.modules.models import Cluster, DeploymentSpec
from aoctl.modules.registry import ClusterRegistry


def make_spec(name, cluster="east", namespace="dev", environment=None, version="1"):
    return DeploymentSpec(
        cluster=cluster,
        environment=environment or namespace,
        name=name,
        namespace=namespace,
        version=version,
    )


class FakeClient:
    """Records calls and answers every application with success."""

    def __init__(self, fail_with=None):
        self.fail_with = fail_with
        self.deploy_calls = []
        self.redeploy_calls = []
        self.closed = 0
        self._lock = threading.Lock()

    def deploy(self, payload):
        with self._lock:
            self.deploy_calls.append(payload)
        if self.fail_with:
            raise self.fail_with
        return [
            {
                "success": True,
                "deployId": f"id-{application_id}",
                "applicationDeploymentSpec": {
                    "name": application_id.split("/")[1],
                    "namespace": application_id.split("/")[0],
                    "cluster": "east",
                },
            }
            for application_id in payload.application_ids
        ]

    def redeploy(self, payload):
        with self._lock:
            self.redeploy_calls.append(payload)
        if self.fail_with:
            raise self.fail_with
        return [
            {"success": True, "applicationRef": ref}
            for ref in payload.application_deployment_refs
        ]

    def close(self):
        with self._lock:
            self.closed += 1


@pytest.fixture
def registry():
    return ClusterRegistry({
        "east": Cluster(name="east", url="https://east.example.com", token="east-token"),
        "west": Cluster(name="west", url="https://west.example.com", token="west-token", reachable=False),
    })


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def broken_client():
    return FakeClient(fail_with=TransportError("connection refused"))
