"""
base.py
- Interface every orchestration backend implements for the pass driver.
"""


class ClusterBackend:
    name = "base"

    def list_nodes(self):
        """Return the ordered list of Node snapshots for this pass."""
        raise NotImplementedError

    def list_schedulable_units(self, node):
        """Return the non-terminal units currently assigned to `node`."""
        raise NotImplementedError

    def remove_unit(self, namespace, name):
        """Evict a unit so the orchestrator reschedules it."""
        raise NotImplementedError
