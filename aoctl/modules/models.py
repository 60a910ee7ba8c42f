"""
Data models for the deploy pipeline.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

# Placeholder for fields and deploy ids that do not exist
NO_VALUE = "-"

UNREACHABLE_REASON = "Cluster is not reachable"

# Keys of the {"value": ..., "source": ...} wrappers used by deploymentspec fields
_WRAPPER_KEYS = {"value", "source", "sources"}


def split_application_id(application_id: str) -> Tuple[str, str]:
    """Split an ``env/app`` identifier into its environment and application."""
    env, sep, app = application_id.partition("/")
    if not sep:
        return "", application_id
    return env, app


@dataclass(frozen=True)
class Cluster:
    """A deploy target as read from the cluster registry."""
    name: str
    url: str
    token: str = ""
    reachable: bool = True


@dataclass(frozen=True)
class DestinationKey:
    """Where a partition is deployed: one namespace on one cluster."""
    cluster: str
    namespace: str

    def __str__(self) -> str:
        return f"{self.cluster}/{self.namespace}"


@dataclass(frozen=True)
class ApplicationRef:
    """Minimal reference to a running application deployment."""
    namespace: str
    name: str

    def to_dict(self) -> Dict[str, str]:
        return {"namespace": self.namespace, "name": self.name}


@dataclass(frozen=True)
class DeploymentSpec:
    """Resolved deployment metadata for one application."""
    cluster: str
    environment: str
    name: str
    namespace: str = ""
    version: str = ""
    ref: str = ""
    fields: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        if not self.namespace:
            object.__setattr__(self, "namespace", self.environment)
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "DeploymentSpec":
        """Build a spec from a deploymentspec item returned by the API.

        Fields may either be plain values or ``{"value": ...}`` wrappers.
        """
        flat = {k: _unwrap(v) for k, v in data.items()}
        return cls(
            cluster=str(flat.get("cluster", "")),
            environment=str(flat.get("envName", flat.get("environment", ""))),
            name=str(flat.get("name", "")),
            namespace=str(flat.get("namespace", "")),
            version=str(flat.get("version", "")),
            fields=flat,
        )

    @property
    def application_id(self) -> str:
        """The ``env/app`` ref the spec was resolved from, or one built from its fields."""
        return self.ref or f"{self.environment}/{self.name}"

    @property
    def destination(self) -> DestinationKey:
        return DestinationKey(self.cluster, self.namespace)

    def to_ref(self) -> ApplicationRef:
        return ApplicationRef(self.namespace, self.name)

    def get(self, path: str) -> str:
        """Read a field, nested ones with a ``/a/b`` path.

        Returns ``NO_VALUE`` when any part of the path is missing.
        """
        parts = [p for p in path.split("/") if p]
        if not parts:
            return NO_VALUE

        if parts[0] in ("cluster", "name", "namespace", "version") and len(parts) == 1:
            value = getattr(self, parts[0])
            return value if value else NO_VALUE

        current: Any = self.fields
        for part in parts:
            if not isinstance(current, Mapping) or part not in current:
                return NO_VALUE
            current = _unwrap(current[part])
        return str(current)


@dataclass
class Partition:
    """Applications sharing one destination, dispatched as one unit."""
    key: DestinationKey
    cluster: Cluster
    affiliation: str = ""
    override_token: Optional[str] = None
    specs: List[DeploymentSpec] = field(default_factory=list)

    @property
    def token(self) -> str:
        return self.override_token or self.cluster.token

    @property
    def application_ids(self) -> List[str]:
        return [spec.application_id for spec in self.specs]

    @property
    def refs(self) -> List[ApplicationRef]:
        return [spec.to_ref() for spec in self.specs]

    def __len__(self) -> int:
        return len(self.specs)


@dataclass(frozen=True)
class DeployResult:
    """Outcome of deploying one application."""
    success: bool
    name: str
    namespace: str
    cluster: str
    reason: str = ""
    deploy_id: str = NO_VALUE

    @classmethod
    def failed(cls, spec: DeploymentSpec, reason: str) -> "DeployResult":
        """A locally fabricated failure for an application that was never deployed."""
        return cls(
            success=False,
            name=spec.name,
            namespace=spec.namespace,
            cluster=spec.cluster,
            reason=reason,
            deploy_id=NO_VALUE,
        )

    @classmethod
    def from_deploy_item(cls, item: Mapping[str, Any], partition: Partition) -> "DeployResult":
        """Parse one item of a deploy response."""
        ads = item.get("applicationDeploymentSpec") or item.get("ads") or {}
        ads = {k: _unwrap(v) for k, v in ads.items()}
        return cls(
            success=bool(item.get("success", False)),
            name=str(ads.get("name", "")),
            namespace=str(ads.get("namespace", partition.key.namespace)),
            cluster=str(ads.get("cluster", partition.key.cluster)),
            reason=str(item.get("reason") or ""),
            deploy_id=str(item.get("deployId") or NO_VALUE),
        )

    @classmethod
    def from_redeploy_item(cls, item: Mapping[str, Any], partition: Partition) -> "DeployResult":
        """Parse one item of a redeploy response."""
        ref = item.get("applicationRef") or {}
        return cls(
            success=bool(item.get("success", False)),
            name=str(ref.get("name", "")),
            namespace=str(ref.get("namespace", partition.key.namespace)),
            cluster=partition.cluster.name,
            reason=str(item.get("reason") or ""),
            deploy_id=str(item.get("deployId") or NO_VALUE),
        )


@dataclass
class PartitionResult:
    """The single bundle a dispatch task emits for its partition."""
    partition: Partition
    results: List[DeployResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return bool(self.results) and all(r.success for r in self.results)


@dataclass(frozen=True)
class AggregateOutcome:
    """Sorted results of a run and the overall verdict."""
    results: Tuple[DeployResult, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True when nothing was dispatched."""
        return not self.results

    @property
    def success(self) -> bool:
        return bool(self.results) and all(r.success for r in self.results)

    @property
    def failed(self) -> List[DeployResult]:
        return [r for r in self.results if not r.success]


@dataclass(frozen=True)
class DeploySelection:
    """Everything the user asked for in one invocation."""
    search_terms: Tuple[str, ...] = ()
    excludes: Tuple[str, ...] = ()
    cluster: Optional[str] = None
    affiliation: str = ""
    override_token: Optional[str] = None
    overrides: Mapping[str, Any] = field(default_factory=dict)
    version: Optional[str] = None
    no_prompt: bool = False
    deploy_all: bool = False

    def __post_init__(self):
        object.__setattr__(self, "search_terms", tuple(self.search_terms))
        object.__setattr__(self, "excludes", tuple(self.excludes))
        object.__setattr__(self, "overrides", MappingProxyType(dict(self.overrides)))


def _unwrap(value: Any) -> Any:
    if isinstance(value, Mapping) and "value" in value and set(value) <= _WRAPPER_KEYS:
        return value["value"]
    return value
