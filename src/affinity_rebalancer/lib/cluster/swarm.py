"""
swarm.py
- Docker Swarm backend for the rebalancer.
- Contains logic for:
    - Listing Swarm nodes with their user labels and built-in node.* attributes
    - Resolving which services have running tasks on a node
    - Reading weighted preferences from service labels or the YAML config
    - Forcibly triggering a rolling update so Swarm re-places the service
"""

from docker.errors import DockerException
from loguru import logger
from requests.exceptions import RequestException

from affinity_rebalancer.core import constants
from affinity_rebalancer.core.config_loader import get_service_preferences
from affinity_rebalancer.core.errors import ClusterError, InvalidRule
from affinity_rebalancer.lib.affinity.models import Node, Unit
from affinity_rebalancer.lib.affinity.rules import parse_preferences, parse_preferences_text
from affinity_rebalancer.lib.cluster.base import ClusterBackend


def node_labels(attrs):
    """Merge a node's user labels with the Swarm built-in constraint attributes."""
    description = attrs.get("Description", {})
    spec = attrs.get("Spec", {})
    platform = description.get("Platform", {})

    labels = dict(spec.get("Labels") or {})
    labels["node.id"] = attrs.get("ID", "")
    labels["node.hostname"] = description.get("Hostname", "")
    labels["node.role"] = spec.get("Role", "")
    labels["node.platform.os"] = platform.get("OS", "")
    labels["node.platform.arch"] = platform.get("Architecture", "")
    return labels


class SwarmBackend(ClusterBackend):
    name = "swarm"

    def __init__(self, client, config=None):
        self.client = client
        self.config = config or {}
        self._services = None

    def list_nodes(self):
        try:
            swarm_nodes = self.client.nodes.list()
            # services are snapshotted together with the nodes
            self._services = {s.id: s for s in self.client.services.list()}
        except (DockerException, RequestException) as e:
            raise ClusterError(f"Failed to list Swarm nodes: {e}") from e

        nodes = []
        for swarm_node in swarm_nodes:
            attrs = swarm_node.attrs
            hostname = attrs.get("Description", {}).get("Hostname") or swarm_node.id
            nodes.append(Node(name=hostname, labels=node_labels(attrs), id=swarm_node.id))
        logger.debug(f"[swarm] Found {len(nodes)} node(s): {[n.name for n in nodes]}")
        return nodes

    def list_schedulable_units(self, node):
        if self._services is None:
            self.list_nodes()
        try:
            tasks = self.client.api.tasks(filters={"node": node.id or node.name, "desired-state": "running"})
        except (DockerException, RequestException) as e:
            raise ClusterError(f"Failed to list tasks on {node.name}: {e}") from e

        units = []
        seen = set()
        for task in tasks:
            state = task.get("Status", {}).get("State", "")
            service = self._services.get(task.get("ServiceID"))
            if state in constants.TERMINAL_TASK_STATES or service is None:
                continue

            labels = service.attrs.get("Spec", {}).get("Labels") or {}
            if labels.get(constants.REBALANCE_OPT_OUT_LABEL, "true").lower() != "true":
                logger.debug(f"[swarm] Skipping {service.name} due to {constants.REBALANCE_OPT_OUT_LABEL}=false")
                continue

            unit = self._service_unit(service, labels, node)
            if unit.identity in seen:
                continue
            seen.add(unit.identity)
            units.append(unit)
        return units

    def _service_unit(self, service, labels, node):
        namespace = labels.get(constants.STACK_NAMESPACE_LABEL, "")
        rules, rule_error = (), None
        try:
            rules = self._service_preferences(service.name, namespace, labels)
        except InvalidRule as e:
            rule_error = str(e)
        return Unit(namespace=namespace, name=service.name, node_name=node.name,
                    preferences=rules, rule_error=rule_error)

    def _service_preferences(self, service_name, namespace, labels):
        raw = labels.get(constants.PREFERENCE_LABEL)
        if raw is not None:
            return parse_preferences_text(raw)

        document = get_service_preferences(self.config, service_name)
        if document is None and namespace and service_name.startswith(f"{namespace}_"):
            document = get_service_preferences(self.config, service_name[len(namespace) + 1:])
        return parse_preferences(document)

    def remove_unit(self, namespace, name):
        """Force-update the service so Swarm reschedules its tasks."""
        try:
            service = self.client.services.get(name)
            service.update(
                labels=service.attrs["Spec"].get("Labels", {}),
                force_update=True,
            )
        except (DockerException, RequestException) as e:
            raise ClusterError(f"Failed to force-update service {name}: {e}") from e
        logger.debug(f"[swarm] Forced update of service: {name}")
