"""
rebalance.py
- One-shot affinity rebalance pass over the current cluster snapshot.
- For every schedulable unit: score it on its current node, look for the first
  node that beats that score by more than the tolerance, and evict it so the
  orchestrator's scheduler can re-place it.
"""

from dataclasses import dataclass, field
from typing import List, Set, Tuple

from loguru import logger

from affinity_rebalancer.core.errors import InvalidRule
from affinity_rebalancer.lib.affinity.scoring import score
from affinity_rebalancer.lib.rebalance.rebalance_decision import find_better_node


@dataclass
class PassResult:
    evaluated: int = 0
    candidates: List[Tuple[str, str, int]] = field(default_factory=list)  # (unit, target node, score)
    evicted: Set[Tuple[str, str]] = field(default_factory=set)
    invalid_units: List[Tuple[str, str]] = field(default_factory=list)  # (unit, reason)

    @property
    def has_potential(self):
        return bool(self.candidates)


def run_rebalance_pass(cluster, tolerance, dry_run=False, strict_rules=False):
    """
    Evaluate every schedulable unit once and evict those with a better node.

    Args:
        cluster (ClusterBackend): Source of nodes/units and the eviction action.
        tolerance (int): Non-negative score margin a candidate must exceed.
        dry_run (bool): Report candidates without evicting anything.
        strict_rules (bool): Abort the pass on the first InvalidRule instead of
            skipping the offending unit.

    Returns:
        PassResult: What was evaluated, proposed, evicted and skipped.

    Raises:
        ClusterError: any failure talking to the orchestrator.
        InvalidRule: only when strict_rules is set.
    """
    if tolerance < 0:
        raise ValueError(f"tolerance must be non-negative, got {tolerance}")

    result = PassResult()
    nodes = cluster.list_nodes()

    for node in nodes:
        for unit in cluster.list_schedulable_units(node):
            result.evaluated += 1

            try:
                current_score = score(unit, node)
            except InvalidRule as e:
                if strict_rules:
                    raise
                logger.error(f"[rebalance] Skipping {unit}: {e}")
                result.invalid_units.append((str(unit), str(e)))
                continue

            found, best_score, best_node = find_better_node(unit, current_score, tolerance, nodes)
            if not found:
                logger.debug(f"[rebalance] {unit} remains on {node.name} (score {current_score})")
                continue

            logger.info(f"[rebalance] {unit} can possibly be scheduled on {best_node} "
                        f"(score {current_score} -> {best_score})")
            result.candidates.append((str(unit), best_node, best_score))

            if dry_run or unit.identity in result.evicted:
                continue
            cluster.remove_unit(unit.namespace, unit.name)
            result.evicted.add(unit.identity)
            logger.info(f"[rebalance] {unit} has been evicted!")

    if not result.has_potential:
        logger.info("[rebalance] No units to evict")
    logger.debug(f"[rebalance] Pass summary: evaluated={result.evaluated} candidates={len(result.candidates)} "
                 f"evicted={len(result.evicted)} invalid={len(result.invalid_units)}")
    return result
