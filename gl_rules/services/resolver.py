"""
Rule priority resolver.

Given the rules of one rule set and a booking's classification,
pick the single rule that decides the GL account. Rule types are
tried from highest to lowest priority:

1. resource          - matches booking.resource_id
2. product_sub_type  - matches booking.product_sub_type_id
3. product_type      - matches booking.product_type_id
4. default           - always matches

The first match wins. If nothing matches and the rule set has no
default rule, resolution fails with NoDefaultRuleError. An account
is never picked by guessing.

Everything here is a pure function over rules that were already
loaded. The functions accept ORM rows or any object with the same
attributes.
"""

import locale
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from gl_rules.exceptions import NoDefaultRuleError
from gl_rules.models.enums import RuleType
from gl_rules.schemas.resolution import BookingClassification
from gl_rules.services.priority import (
    RulePriority,
    evaluation_order,
    get_rule_priority,
)

logger = logging.getLogger(__name__)


# Which booking attribute each targeted rule type is compared against
BOOKING_FIELD_BY_RULE_TYPE: dict[RuleType, str] = {
    RuleType.RESOURCE: "resource_id",
    RuleType.PRODUCT_SUB_TYPE: "product_sub_type_id",
    RuleType.PRODUCT_TYPE: "product_type_id",
}

FALLBACK_TARGET_PREFIXES: dict[RuleType, str] = {
    RuleType.RESOURCE: "Resource",
    RuleType.PRODUCT_SUB_TYPE: "Sub-Type",
    RuleType.PRODUCT_TYPE: "Type",
}


def _active(rules: Iterable) -> list:
    return [rule for rule in rules if not rule.deleted]


def _lowest_id(rules: list):
    """Deterministic tie-break: the oldest rule (lowest id) wins."""
    return min(rules, key=lambda r: (r.id is None, r.id or 0))


def _rule_set_id(rules: list) -> int | None:
    for rule in rules:
        if rule.gl_rule_set_id is not None:
            return rule.gl_rule_set_id
    return None


def resolve_rule(
    rules: Iterable,
    booking: BookingClassification,
    priority: RulePriority | None = None,
):
    """
    Return the rule that applies to the booking.

    Deleted rules are ignored. A booking id that is None never
    matches. When the data breaks the one-rule-per-target or
    one-default-per-set invariants, the lowest id wins and a
    warning is logged.

    Raises NoDefaultRuleError if no targeted rule matched and
    there is no default rule.
    """
    if priority is None:
        priority = get_rule_priority()

    active = _active(rules)

    for rule_type in evaluation_order(priority):
        if rule_type == RuleType.DEFAULT:
            continue

        booking_value = getattr(booking, BOOKING_FIELD_BY_RULE_TYPE[rule_type])
        if booking_value is None:
            continue

        matches = [
            rule for rule in active
            if rule.rule_type == rule_type and rule.target_id == booking_value
        ]
        if not matches:
            continue

        if len(matches) > 1:
            logger.warning(
                "Rule set %s has %d %s rules for target %s; using rule %s",
                matches[0].gl_rule_set_id,
                len(matches),
                rule_type.value,
                booking_value,
                _lowest_id(matches).id,
            )
        return _lowest_id(matches)

    defaults = [rule for rule in active if rule.rule_type == RuleType.DEFAULT]

    if not defaults:
        rule_set_id = _rule_set_id(active)
        logger.error(
            "No rule matched booking %s and rule set %s has no default rule",
            booking.model_dump(),
            rule_set_id,
        )
        raise NoDefaultRuleError(rule_set_id)

    if len(defaults) > 1:
        logger.warning(
            "Rule set %s has %d default rules; using rule %s",
            defaults[0].gl_rule_set_id,
            len(defaults),
            _lowest_id(defaults).id,
        )
    return _lowest_id(defaults)


def target_display_name(
    rule,
    target_names: Mapping[tuple[RuleType, int], str] | None = None,
) -> str:
    """Human-readable name of what the rule targets."""
    if rule.rule_type == RuleType.DEFAULT:
        return "Default"
    if rule.target_id is None:
        return "Unknown"

    if target_names:
        name = target_names.get((rule.rule_type, rule.target_id))
        if name:
            return name

    prefix = FALLBACK_TARGET_PREFIXES.get(rule.rule_type)
    if prefix is None:
        return "Unknown"
    return f"{prefix} #{rule.target_id}"


def sort_rules_for_display(
    rules: Iterable,
    target_names: Mapping[tuple[RuleType, int], str] | None = None,
    priority: RulePriority | None = None,
) -> list:
    """
    Order rules for listing: by priority, then by target name.

    Names compare case-insensitively using the process's LC_COLLATE
    setting, which gl_rules.main takes from the environment at
    startup. This order is only for people reading the list;
    it plays no part in resolution.
    """
    if priority is None:
        priority = get_rule_priority()

    def sort_key(rule):
        name = target_display_name(rule, target_names)
        return (priority[rule.rule_type], locale.strxfrm(name.casefold()))

    return sorted(rules, key=sort_key)


@dataclass
class IntegrityReport:
    """Summary of the invariants a rule set is expected to hold."""
    default_rule_count: int
    duplicate_targets: list[tuple[RuleType, int]] = field(default_factory=list)

    @property
    def has_default_rule(self) -> bool:
        return self.default_rule_count > 0

    @property
    def is_valid(self) -> bool:
        return self.default_rule_count == 1 and not self.duplicate_targets


def check_rule_set_integrity(rules: Iterable) -> IntegrityReport:
    """Count default rules and find targets covered by more than one rule."""
    active = _active(rules)

    default_count = sum(1 for r in active if r.rule_type == RuleType.DEFAULT)

    by_target: dict[tuple[RuleType, int], int] = defaultdict(int)
    for rule in active:
        if rule.rule_type != RuleType.DEFAULT and rule.target_id is not None:
            by_target[(rule.rule_type, rule.target_id)] += 1

    duplicates = sorted(
        (key for key, count in by_target.items() if count > 1),
        key=lambda key: (key[0].value, key[1]),
    )
    return IntegrityReport(
        default_rule_count=default_count,
        duplicate_targets=duplicates,
    )
