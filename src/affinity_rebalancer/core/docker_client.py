"""
docker_client.py
- Provides a shared, preconfigured Docker SDK client for the Swarm backend.
- The client is created on first use so importing this module never touches the daemon.
"""

import docker
from docker.errors import DockerException

from affinity_rebalancer.core.errors import ClusterError

_client = None


def get_client():
    global _client
    if _client is None:
        try:
            _client = docker.from_env()
        except DockerException as e:
            raise ClusterError(f"Couldn't connect to the Docker daemon: {e}") from e
    return _client
