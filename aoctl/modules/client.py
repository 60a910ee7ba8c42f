"""
HTTP client for the deploy API.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import requests
from pydantic import BaseModel, ConfigDict, Field

from aoctl.config import Config
from aoctl.errors import TransportError
from aoctl.modules.filenames import FileNames
from aoctl.modules.models import ApplicationRef, DeploymentSpec, Partition
from aoctl.utils import redact_sensitive_data

logger = logging.getLogger(__name__)


class DeployPayload(BaseModel):
    """Body of a deploy call."""
    application_ids: List[str] = Field(alias="applicationIds")
    overrides: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class RedeployPayload(BaseModel):
    """Body of a redeploy call."""
    application_deployment_refs: List[Dict[str, str]] = Field(alias="applicationDeploymentRefs")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_refs(cls, refs: Sequence[ApplicationRef]) -> "RedeployPayload":
        return cls(application_deployment_refs=[ref.to_dict() for ref in refs])

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class JsonPatchOp(BaseModel):
    """A single JSON patch operation on an AuroraConfig file."""
    op: str
    path: str
    value: Optional[Any] = None

    def to_json(self) -> List[Dict[str, Any]]:
        return [self.model_dump(exclude_none=True)]


@dataclass
class ApiResponse:
    """The ``{success, message, items}`` envelope every endpoint answers with."""
    success: bool
    message: str = ""
    items: List[Any] = field(default_factory=list)

    @classmethod
    def parse(cls, data: Any) -> "ApiResponse":
        if not isinstance(data, dict):
            raise TransportError(f"Unexpected response body: {data!r}")
        return cls(
            success=bool(data.get("success", False)),
            message=str(data.get("message") or ""),
            items=list(data.get("items") or []),
        )


class APIClient:
    """Client for one deploy API endpoint (the default one, or one per cluster)."""

    def __init__(
        self,
        url: str,
        token: str = "",
        affiliation: str = "",
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the API client.

        Args:
            url: Base URL of the deploy API
            token: Bearer token sent with every request
            affiliation: AuroraConfig the requests operate on
            timeout: Request timeout in seconds, defaults to ``Config.API_TIMEOUT``
            session: Optional session, mainly for tests
        """
        self.url = url.rstrip('/')
        self.token = token
        self.affiliation = affiliation
        self.timeout = timeout or Config.API_TIMEOUT
        self.session = session or requests.Session()
        self.logger = logging.getLogger(f"{__name__}.APIClient")

    @classmethod
    def for_partition(cls, partition: Partition) -> "APIClient":
        """Client talking to the cluster a partition is deployed to."""
        return cls(partition.cluster.url, partition.token, partition.affiliation)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def do(
        self,
        method: str,
        endpoint: str,
        payload: Optional[Any] = None,
        params: Optional[Any] = None,
        allow_failed_items: bool = False,
    ) -> ApiResponse:
        """Perform a request and parse the response envelope.

        Args:
            method: HTTP method
            endpoint: Path below the base URL
            payload: JSON body
            params: Query parameters
            allow_failed_items: Accept error statuses that still carry per-item results

        Raises:
            TransportError: On connection errors, non JSON bodies or error responses
        """
        url = f"{self.url}{endpoint}"
        headers = self._headers()
        self.logger.debug(
            f"{method} {url} headers={redact_sensitive_data(headers)} body={payload}"
        )

        try:
            response = self.session.request(
                method, url, json=payload, params=params,
                headers=headers, timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        self.logger.debug(f"{method} {url} -> {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(
                f"{method} {url} returned {response.status_code} with a non JSON body",
                status_code=response.status_code,
            ) from e

        result = ApiResponse.parse(body)
        if response.status_code >= 400 and not (allow_failed_items and result.items):
            message = result.message or response.reason or "request failed"
            raise TransportError(
                f"{method} {url} returned {response.status_code}: {message}",
                status_code=response.status_code,
            )
        return result

    def get_file_names(self) -> FileNames:
        response = self.do("GET", f"/v1/auroraconfig/{self.affiliation}/filenames")
        if not response.success:
            raise TransportError(f"Could not list files: {response.message}")
        return FileNames(str(item) for item in response.items)

    def get_deployment_specs(self, application_ids: Sequence[str]) -> List[DeploymentSpec]:
        """Fetch the deployment spec of every given ``env/app`` ref."""
        if not application_ids:
            return []
        params = [("ref", ref) for ref in application_ids]
        response = self.do(
            "GET", f"/v1/auroraconfig/{self.affiliation}/deploymentspec", params=params
        )
        if not response.success:
            raise TransportError(f"Could not fetch deployment specs: {response.message}")
        return [DeploymentSpec.from_api(item) for item in response.items]

    def patch_file(self, file_name: str, operation: JsonPatchOp) -> None:
        """Apply a JSON patch to one AuroraConfig file."""
        response = self.do(
            "PATCH",
            f"/v1/auroraconfig/{self.affiliation}/{file_name}",
            payload=operation.to_json(),
        )
        if not response.success:
            raise TransportError(f"Could not patch {file_name}: {response.message}")

    def deploy(self, payload: DeployPayload) -> List[Dict[str, Any]]:
        """Deploy applications, returning one raw result item per application."""
        response = self.do(
            "PUT", f"/v1/apply/{self.affiliation}",
            payload=payload.to_json(), allow_failed_items=True,
        )
        if not response.success and not response.items:
            raise TransportError(response.message or "Deploy failed")
        return response.items

    def redeploy(self, payload: RedeployPayload) -> List[Dict[str, Any]]:
        """Redeploy running application deployments."""
        response = self.do(
            "POST", "/v1/applicationdeployment/redeploy",
            payload=payload.to_json(), allow_failed_items=True,
        )
        if not response.success and not response.items:
            raise TransportError(response.message or "Redeploy failed")
        return response.items

    def close(self) -> None:
        self.session.close()

    def __repr__(self) -> str:
        return f"APIClient(url={self.url!r}, affiliation={self.affiliation!r})"
