"""
Cluster backends and the factory that picks one by name.
"""

from affinity_rebalancer.lib.cluster.base import ClusterBackend


def get_backend(name, config=None, kubeconfig=None, kube_context=None):
    """
    Build the backend named `name` ("swarm", "kubernetes" or "k8s").

    Clients are imported lazily so a Swarm deployment never needs kubeconfig
    and vice versa.
    """
    config = config or {}
    backend = (name or "swarm").lower()

    if backend == "swarm":
        from affinity_rebalancer.core.docker_client import get_client
        from affinity_rebalancer.lib.cluster.swarm import SwarmBackend
        return SwarmBackend(get_client(), config)

    if backend in ("kubernetes", "k8s"):
        from affinity_rebalancer.core.kube_client import load_core_api
        from affinity_rebalancer.lib.cluster.k8s import KubernetesBackend
        kube_cfg = config.get("kubernetes") or {}
        core_api = load_core_api(
            kubeconfig=kubeconfig or kube_cfg.get("kubeconfig"),
            context=kube_context or kube_cfg.get("context"),
        )
        return KubernetesBackend(core_api)

    raise ValueError(f"Unknown orchestration backend: {name!r}")


__all__ = ["ClusterBackend", "get_backend"]
