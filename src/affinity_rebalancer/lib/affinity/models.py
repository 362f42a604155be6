"""
models.py
- Immutable snapshot types evaluated by the scorer during one rebalance pass.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


@dataclass(frozen=True)
class MatchExpression:
    key: str
    operator: str
    values: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))


@dataclass(frozen=True)
class PreferenceRule:
    """A weighted conjunction of match expressions."""

    weight: int
    expressions: Tuple[MatchExpression, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "expressions", tuple(self.expressions))


@dataclass(frozen=True)
class Node:
    name: str
    labels: Mapping[str, str] = field(default_factory=dict)
    id: str = ""

    def __post_init__(self):
        object.__setattr__(self, "labels", MappingProxyType(dict(self.labels)))


@dataclass(frozen=True)
class Unit:
    """
    A schedulable workload bound to one node.

    rule_error holds the reason a preference document could not be parsed;
    scoring such a unit raises InvalidRule instead of treating it as empty.
    """

    namespace: str
    name: str
    node_name: str
    preferences: Tuple[PreferenceRule, ...] = ()
    rule_error: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "preferences", tuple(self.preferences))

    @property
    def identity(self):
        return self.namespace, self.name

    def __str__(self):
        return f"{self.namespace}/{self.name}" if self.namespace else self.name
