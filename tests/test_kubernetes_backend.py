"""
Tests for the Kubernetes backend using kubernetes client models and a mocked API.
"""

from unittest.mock import MagicMock

import pytest
from kubernetes import client
from kubernetes.client.rest import ApiException

from affinity_rebalancer.core.errors import ClusterError
from affinity_rebalancer.lib.cluster.k8s import KubernetesBackend, pod_field_selector, pod_preferences


def k8s_node(name, labels):
    return client.V1Node(metadata=client.V1ObjectMeta(name=name, labels=labels, uid=f"uid-{name}"))


def k8s_pod(name, node_name, terms=None, namespace="default"):
    affinity = None
    if terms is not None:
        affinity = client.V1Affinity(node_affinity=client.V1NodeAffinity(
            preferred_during_scheduling_ignored_during_execution=terms,
        ))
    return client.V1Pod(
        metadata=client.V1ObjectMeta(name=name, namespace=namespace),
        spec=client.V1PodSpec(containers=[], node_name=node_name, affinity=affinity),
    )


def term(weight, key, operator, values=None):
    return client.V1PreferredSchedulingTerm(
        weight=weight,
        preference=client.V1NodeSelectorTerm(match_expressions=[
            client.V1NodeSelectorRequirement(key=key, operator=operator, values=values),
        ]),
    )


@pytest.fixture
def core_api():
    api = MagicMock()
    api.list_node.return_value = client.V1NodeList(items=[
        k8s_node("node-a", {"zone": "us-west"}),
        k8s_node("node-b", None),
    ])
    return api


class TestPodPreferences:
    """Translating node-affinity terms."""

    def test_no_affinity(self):
        assert pod_preferences(k8s_pod("web", "node-a")) == []

    def test_preferred_terms(self):
        pod = k8s_pod("web", "node-a", [term(10, "zone", "In", ["us-east"]), term(2, "gpu", "Exists")])
        rules = pod_preferences(pod)
        assert [r.weight for r in rules] == [10, 2]
        assert rules[0].expressions[0].values == ("us-east",)
        assert rules[1].expressions[0].values == ()


class TestKubernetesBackend:
    """CoreV1 calls and error wrapping."""

    def test_list_nodes(self, core_api):
        nodes = KubernetesBackend(core_api).list_nodes()
        assert [n.name for n in nodes] == ["node-a", "node-b"]
        assert dict(nodes[1].labels) == {}

    def test_field_selector_excludes_terminal_pods(self):
        assert pod_field_selector("node-a") == (
            "spec.nodeName=node-a,status.phase!=Succeeded,status.phase!=Failed"
        )

    def test_list_schedulable_units(self, core_api):
        core_api.list_pod_for_all_namespaces.return_value = client.V1PodList(items=[
            k8s_pod("web-1", "node-a", [term(10, "zone", "In", ["us-east"])], namespace="shop"),
        ])
        backend = KubernetesBackend(core_api)
        node = backend.list_nodes()[0]

        units = backend.list_schedulable_units(node)

        core_api.list_pod_for_all_namespaces.assert_called_once_with(field_selector=pod_field_selector("node-a"))
        assert [(u.namespace, u.name, u.node_name) for u in units] == [("shop", "web-1", "node-a")]

    def test_remove_unit_deletes_pod(self, core_api):
        KubernetesBackend(core_api).remove_unit("shop", "web-1")
        core_api.delete_namespaced_pod.assert_called_once_with(name="web-1", namespace="shop")

    def test_list_nodes_error_is_fatal(self, core_api):
        core_api.list_node.side_effect = ApiException(status=500, reason="boom")
        with pytest.raises(ClusterError):
            KubernetesBackend(core_api).list_nodes()

    def test_list_pods_error_is_fatal(self, core_api):
        core_api.list_pod_for_all_namespaces.side_effect = ApiException(status=403, reason="Forbidden")
        backend = KubernetesBackend(core_api)
        with pytest.raises(ClusterError):
            backend.list_schedulable_units(backend.list_nodes()[0])

    def test_delete_error_is_fatal(self, core_api):
        core_api.delete_namespaced_pod.side_effect = ApiException(status=404, reason="Not Found")
        with pytest.raises(ClusterError):
            KubernetesBackend(core_api).remove_unit("shop", "web-1")
