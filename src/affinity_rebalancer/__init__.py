"""
affinity_rebalancer
- Evicts workloads whose weighted node-affinity preferences would score
  strictly better on another node, letting the orchestrator re-place them.
"""

__version__ = "0.1.0"
