from . import apps, cluster, deploy, redeploy

__all__ = ['apps', 'cluster', 'deploy', 'redeploy']
