"""
scoring.py
- Computes a unit's affinity score on a node: the sum of the weights of every
  preference rule whose match expressions all hold for the node's labels.
"""

from affinity_rebalancer.core.errors import InvalidRule
from affinity_rebalancer.lib.affinity.selector import compile_preferences


def score(unit, node):
    """
    Score `unit` against `node`.

    Args:
        unit (Unit): The workload and its preference rules.
        node (Node): The candidate node snapshot.

    Returns:
        int: Sum of weights of satisfied rules (0 when the unit has no preferences).

    Raises:
        InvalidRule: if the unit's preferences cannot be compiled. The score is
        undefined in that case; callers must not read it as 0.
    """
    if unit.rule_error:
        raise InvalidRule(f"{unit}: {unit.rule_error}")

    total = 0
    for weight, selector in compile_preferences(unit.preferences):
        if selector.matches(node.labels):
            total += weight
    return total
