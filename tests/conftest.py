"""
Pytest configuration and shared fixtures.
"""

import pytest

from affinity_rebalancer.core.errors import ClusterError
from affinity_rebalancer.lib.affinity.models import MatchExpression, Node, PreferenceRule, Unit


def rule(weight, *expressions):
    """Build a PreferenceRule from (key, operator, values) tuples."""
    return PreferenceRule(
        weight=weight,
        expressions=[MatchExpression(key, op, values) for key, op, values in expressions],
    )


def make_unit(*rules, name="web", namespace="default", node_name="node-a", rule_error=None):
    return Unit(namespace=namespace, name=name, node_name=node_name, preferences=rules, rule_error=rule_error)


class FakeCluster:
    """In-memory stand-in for an orchestration backend."""

    name = "fake"

    def __init__(self, nodes, units_by_node, fail_on=None):
        self.nodes = nodes
        self.units_by_node = units_by_node
        self.removed = []
        self.fail_on = fail_on or set()

    def list_nodes(self):
        if "list_nodes" in self.fail_on:
            raise ClusterError("nodes unavailable")
        return list(self.nodes)

    def list_schedulable_units(self, node):
        if "list_units" in self.fail_on:
            raise ClusterError(f"units unavailable on {node.name}")
        return list(self.units_by_node.get(node.name, []))

    def remove_unit(self, namespace, name):
        if "remove" in self.fail_on:
            raise ClusterError(f"cannot remove {namespace}/{name}")
        self.removed.append((namespace, name))


@pytest.fixture
def zone_nodes():
    """Three nodes in listing order: us-west, us-east, eu-central."""
    return [
        Node(name="node-a", labels={"zone": "us-west", "disk": "hdd"}),
        Node(name="node-b", labels={"zone": "us-east", "disk": "ssd", "cpu-gen": "3"}),
        Node(name="node-c", labels={"zone": "eu-central", "disk": "ssd", "cpu-gen": "5", "gpu": "true"}),
    ]


@pytest.fixture
def east_unit():
    """Unit on node-a that prefers zone=us-east with weight 10."""
    return make_unit(rule(10, ("zone", "In", ["us-east"])))
