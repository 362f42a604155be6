"""
errors.py
- Error types shared by the scorer, the decision engine and the cluster backends.
- InvalidRule: a unit's preference rules cannot be evaluated (fatal for that unit).
- ClusterError: the orchestration API failed (always fatal for the run).
"""


class RebalanceError(Exception):
    """Base class for all rebalancer errors."""


class InvalidRule(RebalanceError):
    def __init__(self, message, operator=None, key=None):
        super().__init__(message)
        self.operator = operator
        self.key = key


class ClusterError(RebalanceError):
    """Raised when listing nodes/units or removing a unit fails."""
