from typing import Dict, Iterator, Optional

from aoctl.config import AOConfig, ClusterConfig
from .models import Cluster


class ClusterRegistry:
    """Read-only lookup of clusters by name."""

    def __init__(self, clusters: Optional[Dict[str, Cluster]] = None):
        self._clusters = dict(clusters or {})

    @classmethod
    def from_config(cls, config: AOConfig) -> "ClusterRegistry":
        return cls({
            name: Cluster(name=name, url=c.url, token=c.token, reachable=c.reachable)
            for name, c in config.clusters.items()
        })

    def get(self, name: str) -> Optional[Cluster]:
        return self._clusters.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._clusters

    def __iter__(self) -> Iterator[Cluster]:
        return iter(self._clusters[name] for name in sorted(self._clusters))

    def __len__(self) -> int:
        return len(self._clusters)


def register_cluster(config: AOConfig, name: str, url: str, token: str = "", reachable: bool = True) -> AOConfig:
    """Return a copy of ``config`` with the cluster added or replaced."""
    clusters = dict(config.clusters)
    clusters[name] = ClusterConfig(url=url, token=token, reachable=reachable)
    return config.model_copy(update={"clusters": clusters})
