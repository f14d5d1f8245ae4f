"""
Tests for the rule priority configuration.
"""

import pytest

from gl_rules.models.enums import RuleType
from gl_rules.services.priority import (
    evaluation_order,
    get_rule_priority,
    parse_rule_priority,
)


def test_default_configuration():
    assert get_rule_priority() == {
        RuleType.RESOURCE: 1,
        RuleType.PRODUCT_SUB_TYPE: 2,
        RuleType.PRODUCT_TYPE: 3,
        RuleType.DEFAULT: 4,
    }


def test_evaluation_order_follows_priority():
    priority = parse_rule_priority(" product_type , resource,product_sub_type,default")
    assert evaluation_order(priority) == [
        RuleType.PRODUCT_TYPE,
        RuleType.RESOURCE,
        RuleType.PRODUCT_SUB_TYPE,
        RuleType.DEFAULT,
    ]


@pytest.mark.parametrize("order, message", [
    ("resource,product_sub_type,product_type,bogus,default", "Unknown"),
    ("resource,resource,product_type,default", "Duplicate"),
    ("resource,product_type,default", "missing"),
    ("default,resource,product_sub_type,product_type", "lowest priority"),
])
def test_invalid_orders_rejected(order, message):
    with pytest.raises(ValueError, match=message):
        parse_rule_priority(order)
