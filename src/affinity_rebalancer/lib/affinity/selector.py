"""
selector.py
- Compiles match expressions into label selectors.
- A Selector is the conjunction of its requirements; compile_preferences() turns
  a unit's weighted rules into (weight, selector) pairs for the scorer.
"""

import re

from affinity_rebalancer.core import constants
from affinity_rebalancer.core.errors import InvalidRule

_NAME_RE = re.compile(r"([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9]")
_PREFIX_RE = re.compile(r"[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*")
_INT_RE = re.compile(r"[+-]?[0-9]+")
_VALUE_RE = re.compile(r"(([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9])?")


def _parse_int(value):
    if value is None or not _INT_RE.fullmatch(value):
        return None
    return int(value)


def _in(labels, key, values):
    return key in labels and labels[key] in values


def _not_in(labels, key, values):
    return key not in labels or labels[key] not in values


def _exists(labels, key, values):
    return key in labels


def _does_not_exist(labels, key, values):
    return key not in labels


def _gt(labels, key, values):
    actual = _parse_int(labels.get(key))
    return actual is not None and actual > values[0]


def _lt(labels, key, values):
    actual = _parse_int(labels.get(key))
    return actual is not None and actual < values[0]


_OPERATORS = {
    constants.OP_IN: _in,
    constants.OP_NOT_IN: _not_in,
    constants.OP_EXISTS: _exists,
    constants.OP_DOES_NOT_EXIST: _does_not_exist,
    constants.OP_GT: _gt,
    constants.OP_LT: _lt,
}


def validate_label_key(key):
    prefix, _, name = key.rpartition("/")
    if "/" in key and (not prefix or len(prefix) > 253 or not _PREFIX_RE.fullmatch(prefix)):
        raise InvalidRule(f"{key!r} has an invalid label key prefix", key=key)
    if len(name) > 63 or not _NAME_RE.fullmatch(name):
        raise InvalidRule(f"{key!r} is not a valid label key", key=key)


def validate_label_value(key, value):
    if len(value) > 63 or not _VALUE_RE.fullmatch(value):
        raise InvalidRule(f"{key}: {value!r} is not a valid label value", key=key)


class Requirement:
    """A single compiled match expression."""

    def __init__(self, key, operator, values):
        self.key = key
        self.operator = operator
        self.values = values
        self._check = _OPERATORS[operator]

    def matches(self, labels):
        return self._check(labels, self.key, self.values)

    def __repr__(self):
        return f"Requirement({self.key!r} {self.operator} {self.values!r})"


def new_requirement(key, operator, values):
    """
    Validate one match expression and compile it into a Requirement.

    Raises:
        InvalidRule: unknown operator, malformed key, or a value list that
        does not fit the operator.
    """
    op = constants.OPERATOR_ALIASES.get(operator, operator)
    if op not in _OPERATORS:
        raise InvalidRule(f"{operator!r} is not a valid node selector operator", operator=operator, key=key)

    validate_label_key(key)

    if op in (constants.OP_IN, constants.OP_NOT_IN):
        if not values:
            raise InvalidRule(f"{key}: values must be non-empty for operator {operator}", operator=operator, key=key)
        for value in values:
            validate_label_value(key, value)
        return Requirement(key, op, frozenset(values))

    if op in (constants.OP_EXISTS, constants.OP_DOES_NOT_EXIST):
        if values:
            raise InvalidRule(f"{key}: values must be empty for operator {operator}", operator=operator, key=key)
        return Requirement(key, op, ())

    if len(values) != 1:
        raise InvalidRule(f"{key}: exactly one value is required for operator {operator}", operator=operator, key=key)
    bound = _parse_int(values[0])
    if bound is None:
        raise InvalidRule(f"{key}: {values[0]!r} is not an integer for operator {operator}", operator=operator, key=key)
    return Requirement(key, op, (bound,))


class Selector:
    """Conjunction of requirements. An empty selector built from no expressions selects nothing."""

    def __init__(self, requirements, select_nothing=False):
        self.requirements = tuple(requirements)
        self.select_nothing = select_nothing

    def matches(self, labels):
        if self.select_nothing:
            return False
        return all(req.matches(labels) for req in self.requirements)

    def __repr__(self):
        if self.select_nothing:
            return "Selector(<nothing>)"
        return f"Selector({list(self.requirements)!r})"


NOTHING = Selector((), select_nothing=True)


def expressions_as_selector(expressions):
    if not expressions:
        return NOTHING
    return Selector(new_requirement(e.key, e.operator, e.values) for e in expressions)


def compile_preferences(rules):
    """
    Compile weighted rules into (weight, selector) pairs.

    Zero-weight rules are dropped before compilation, so nothing inside them
    is validated. Any other invalid rule raises InvalidRule.
    """
    return [
        (rule.weight, expressions_as_selector(rule.expressions))
        for rule in rules
        if rule.weight != 0
    ]
