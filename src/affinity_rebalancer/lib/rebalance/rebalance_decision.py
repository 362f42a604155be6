"""
rebalance_decision.py
- Encapsulates the decision logic for affinity-aware rebalancing.
- find_better_node() scans candidates in the order given and stops at the
  first node whose score beats the current one by more than the tolerance.
"""

from loguru import logger

from affinity_rebalancer.core.errors import InvalidRule
from affinity_rebalancer.lib.affinity.scoring import score


def find_better_node(unit, current_score, tolerance, nodes):
    """
    Look for the first node that scores strictly better than the current one.

    Args:
        unit (Unit): The workload being evaluated.
        current_score (int): The unit's score on its current node.
        tolerance (int): Margin a candidate must exceed current_score by.
        nodes (list[Node]): Candidates, in cluster listing order.

    Returns:
        tuple: (found, best_score, best_node_name); (False, 0, "") when no
        candidate qualifies or the list is empty.
    """
    for node in nodes:
        try:
            candidate_score = score(unit, node)
        except InvalidRule as e:
            logger.debug(f"[rebalance] Skipping candidate {node.name} for {unit}: {e}")
            continue

        if candidate_score - tolerance > current_score:
            return True, candidate_score, node.name

    return False, 0, ""
