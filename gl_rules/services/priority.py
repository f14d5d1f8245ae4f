"""
Rule priority configuration.

The order in which rule types are evaluated is configuration,
not a literal buried in the resolver. It comes from the
RULE_PRIORITY_ORDER setting and is validated here, so the
evaluation order can be audited and tested on its own.
"""

from typing import Mapping

from gl_rules.config import get_settings
from gl_rules.models.enums import RuleType


RulePriority = Mapping[RuleType, int]


def parse_rule_priority(order: str) -> dict[RuleType, int]:
    """
    Turn a comma-separated list of rule types into a priority map.

    The first type gets priority 1 (highest). Every rule type must
    appear exactly once and the default rule must come last, since
    it is the fallback when nothing else matches.
    """
    names = [name.strip() for name in order.split(",") if name.strip()]

    try:
        rule_types = [RuleType(name) for name in names]
    except ValueError:
        raise ValueError(f"Unknown rule type in priority order '{order}'")

    if len(set(rule_types)) != len(rule_types):
        raise ValueError(f"Duplicate rule type in priority order '{order}'")

    missing = set(RuleType) - set(rule_types)
    if missing:
        missing_names = sorted(t.value for t in missing)
        raise ValueError(f"Priority order is missing rule types: {missing_names}")

    if rule_types[-1] != RuleType.DEFAULT:
        raise ValueError("The default rule type must have the lowest priority")

    return {rule_type: rank for rank, rule_type in enumerate(rule_types, start=1)}


def get_rule_priority() -> dict[RuleType, int]:
    """Return the configured priority map."""
    return parse_rule_priority(get_settings().RULE_PRIORITY_ORDER)


def evaluation_order(priority: RulePriority) -> list[RuleType]:
    """Rule types sorted from highest to lowest priority."""
    return sorted(priority, key=lambda rule_type: priority[rule_type])
