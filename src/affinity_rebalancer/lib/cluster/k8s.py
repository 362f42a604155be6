"""
k8s.py
- Kubernetes backend for the rebalancer.
- Nodes and non-terminal pods come from the CoreV1 API; weighted preferences
  are the pod's preferredDuringSchedulingIgnoredDuringExecution node-affinity terms.
- Eviction deletes the pod so its controller recreates it through the scheduler.
"""

from kubernetes.client.rest import ApiException
from loguru import logger
from urllib3.exceptions import HTTPError

from affinity_rebalancer.core import constants
from affinity_rebalancer.core.errors import ClusterError
from affinity_rebalancer.lib.affinity.models import MatchExpression, Node, PreferenceRule, Unit
from affinity_rebalancer.lib.cluster.base import ClusterBackend


def pod_field_selector(node_name):
    phases = ",".join(f"status.phase!={phase}" for phase in constants.TERMINAL_POD_PHASES)
    return f"spec.nodeName={node_name},{phases}"


def pod_preferences(pod):
    """Translate a V1Pod's preferred node-affinity terms into PreferenceRules."""
    affinity = pod.spec.affinity
    if affinity is None or affinity.node_affinity is None:
        return []
    terms = affinity.node_affinity.preferred_during_scheduling_ignored_during_execution or []

    rules = []
    for term in terms:
        expressions = [
            MatchExpression(key=expr.key, operator=expr.operator, values=expr.values or [])
            for expr in (term.preference.match_expressions or [])
        ]
        rules.append(PreferenceRule(weight=term.weight or 0, expressions=expressions))
    return rules


class KubernetesBackend(ClusterBackend):
    name = "kubernetes"

    def __init__(self, core_api):
        self.core_api = core_api

    def list_nodes(self):
        try:
            items = self.core_api.list_node().items
        except (ApiException, HTTPError) as e:
            raise ClusterError(f"Failed to list nodes: {e}") from e
        nodes = [Node(name=n.metadata.name, labels=n.metadata.labels or {}, id=n.metadata.uid or "") for n in items]
        logger.debug(f"[kubernetes] Found {len(nodes)} node(s): {[n.name for n in nodes]}")
        return nodes

    def list_schedulable_units(self, node):
        try:
            pods = self.core_api.list_pod_for_all_namespaces(field_selector=pod_field_selector(node.name)).items
        except (ApiException, HTTPError) as e:
            raise ClusterError(f"Failed to list pods on {node.name}: {e}") from e

        return [
            Unit(
                namespace=pod.metadata.namespace,
                name=pod.metadata.name,
                node_name=pod.spec.node_name or node.name,
                preferences=pod_preferences(pod),
            )
            for pod in pods
        ]

    def remove_unit(self, namespace, name):
        try:
            self.core_api.delete_namespaced_pod(name=name, namespace=namespace)
        except (ApiException, HTTPError) as e:
            raise ClusterError(f"Failed to delete pod {namespace}/{name}: {e}") from e
