"""
rules.py
- Parses declarative preference documents into PreferenceRule objects.
- Accepts the Kubernetes preferred-term shape:
      - weight: 10
        preference:
          matchExpressions:
            - {key: zone, operator: In, values: [us-east]}
  A top-level `matchExpressions` (without `preference:`) is accepted too.
- Only the structure is checked here. Operators and values are validated
  when the rule is compiled, so a bad operator in a zero-weight rule stays inert.
"""

import yaml

from affinity_rebalancer.core.errors import InvalidRule
from affinity_rebalancer.lib.affinity.models import MatchExpression, PreferenceRule


def parse_preferences_text(text):
    """Parse a YAML (or JSON) preference document from a label value."""
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise InvalidRule(f"preference document is not valid YAML: {e}") from e
    return parse_preferences(document)


def parse_preferences(document):
    if document is None:
        return []
    if not isinstance(document, list):
        raise InvalidRule(f"preferences must be a list, got {type(document).__name__}")
    return [_parse_rule(index, term) for index, term in enumerate(document)]


def _parse_rule(index, term):
    if not isinstance(term, dict):
        raise InvalidRule(f"preference #{index} must be a mapping")

    weight = term.get("weight", 0)
    if isinstance(weight, bool) or not isinstance(weight, int):
        raise InvalidRule(f"preference #{index} has a non-integer weight: {weight!r}")
    if weight < 0:
        raise InvalidRule(f"preference #{index} has a negative weight: {weight}")

    preference = term.get("preference", term)
    if not isinstance(preference, dict):
        raise InvalidRule(f"preference #{index} has a malformed `preference` block")
    raw_expressions = preference.get("matchExpressions") or []
    if not isinstance(raw_expressions, list):
        raise InvalidRule(f"preference #{index} matchExpressions must be a list")

    expressions = [_parse_expression(index, raw) for raw in raw_expressions]
    return PreferenceRule(weight=weight, expressions=expressions)


def _parse_expression(index, raw):
    if not isinstance(raw, dict) or "key" not in raw:
        raise InvalidRule(f"preference #{index} has a match expression without a key")

    values = raw.get("values") or []
    if not isinstance(values, list):
        raise InvalidRule(f"preference #{index} values for {raw['key']!r} must be a list", key=raw["key"])

    return MatchExpression(
        key=str(raw["key"]),
        operator=str(raw.get("operator", "")),
        values=[_label_value(index, raw["key"], v) for v in values],
    )


def _label_value(index, key, value):
    # label values are strings; unquoted YAML scalars arrive as bool/int/float
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise InvalidRule(f"preference #{index} value {value!r} for {key!r} is not a scalar", key=key)
