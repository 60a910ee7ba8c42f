from unittest.mock import MagicMock

import pytest
import requests
from jsonschema import validate

from aoctl.errors import TransportError
from aoctl.modules.client import APIClient, DeployPayload, JsonPatchOp, RedeployPayload
from aoctl.modules.models import ApplicationRef

DEPLOY_SCHEMA = {
    "type": "object",
    "properties": {
        "applicationIds": {"type": "array", "items": {"type": "string"}},
        "overrides": {"type": "object"},
    },
    "required": ["applicationIds", "overrides"],
    "additionalProperties": False,
}

REDEPLOY_SCHEMA = {
    "type": "object",
    "properties": {
        "applicationDeploymentRefs": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "namespace": {"type": "string"},
                    "name": {"type": "string"},
                },
                "required": ["namespace", "name"],
            },
        },
    },
    "required": ["applicationDeploymentRefs"],
    "additionalProperties": False,
}


def _response(status_code=200, body=None, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


def _client(*responses):
    session = MagicMock()
    session.request.side_effect = list(responses)
    return APIClient("https://api.example.com/", token="secret", affiliation="paas", session=session), session


def test_deploy_payload_wire_shape():
    payload = DeployPayload(application_ids=["dev/foo"], overrides={"foo.json": {"replicas": 2}})
    validate(instance=payload.to_json(), schema=DEPLOY_SCHEMA)
    assert payload.to_json() == {"applicationIds": ["dev/foo"], "overrides": {"foo.json": {"replicas": 2}}}


def test_redeploy_payload_wire_shape():
    payload = RedeployPayload.from_refs([ApplicationRef("paas-dev", "foo")])
    validate(instance=payload.to_json(), schema=REDEPLOY_SCHEMA)


def test_get_file_names():
    client, session = _client(_response(body={"success": True, "items": ["about.json", "dev/foo.json"]}))

    files = client.get_file_names()

    assert files.application_deployment_refs() == ["dev/foo"]
    method, url = session.request.call_args.args
    assert method == "GET"
    assert url == "https://api.example.com/v1/auroraconfig/paas/filenames"
    assert session.request.call_args.kwargs["headers"]["Authorization"] == "Bearer secret"


def test_get_deployment_specs_sends_one_ref_per_application():
    client, session = _client(_response(body={
        "success": True,
        "items": [{"cluster": "east", "envName": "dev", "name": "foo"}],
    }))

    specs = client.get_deployment_specs(["dev/foo"])

    assert specs[0].application_id == "dev/foo"
    assert session.request.call_args.kwargs["params"] == [("ref", "dev/foo")]


def test_deploy_returns_items_even_when_some_failed():
    items = [{"success": False, "reason": "quota", "applicationDeploymentSpec": {"name": "foo"}}]
    client, session = _client(_response(400, {"success": False, "message": "failed", "items": items}))

    assert client.deploy(DeployPayload(application_ids=["dev/foo"])) == items
    method, url = session.request.call_args.args
    assert (method, url) == ("PUT", "https://api.example.com/v1/apply/paas")


def test_redeploy_posts_refs():
    client, session = _client(_response(body={"success": True, "items": []}))

    client.redeploy(RedeployPayload.from_refs([ApplicationRef("paas-dev", "foo")]))

    assert session.request.call_args.kwargs["json"] == {
        "applicationDeploymentRefs": [{"namespace": "paas-dev", "name": "foo"}]
    }


def test_patch_file_sends_json_patch():
    client, session = _client(_response(body={"success": True}))

    client.patch_file("dev/foo.json", JsonPatchOp(op="add", path="/version", value="2"))

    assert session.request.call_args.kwargs["json"] == [{"op": "add", "path": "/version", "value": "2"}]


def test_connection_error_is_a_transport_error():
    session = MagicMock()
    session.request.side_effect = requests.ConnectionError("refused")
    client = APIClient("https://api.example.com", session=session)

    with pytest.raises(TransportError, match="refused"):
        client.deploy(DeployPayload(application_ids=["dev/foo"]))


def test_error_status_without_items_is_a_transport_error():
    client, _ = _client(_response(500, {"success": False, "message": "boom"}, reason="Server Error"))

    with pytest.raises(TransportError) as exc:
        client.deploy(DeployPayload(application_ids=["dev/foo"]))
    assert exc.value.status_code == 500
    assert "boom" in str(exc.value)


def test_non_json_body_is_a_transport_error():
    client, _ = _client(_response(502, ValueError("no json"), reason="Bad Gateway"))

    with pytest.raises(TransportError):
        client.get_file_names()


def test_unsuccessful_listing_is_a_transport_error():
    client, _ = _client(_response(body={"success": False, "message": "no such affiliation"}))

    with pytest.raises(TransportError, match="no such affiliation"):
        client.get_file_names()


def test_close_closes_the_session():
    client, session = _client()
    client.close()
    session.close.assert_called_once()
