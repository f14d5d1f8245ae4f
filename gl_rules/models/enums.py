"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid rule types and rule set types can be stored.
"""

import enum


class RuleType(str, enum.Enum):
    """What a rule matches on. Also decides its precedence."""
    RESOURCE = "resource"
    PRODUCT_SUB_TYPE = "product_sub_type"
    PRODUCT_TYPE = "product_type"
    DEFAULT = "default"


class RuleSetType(str, enum.Enum):
    """Allocation lane of a rule set. Lanes never interact."""
    REVENUE = "revenue"
    COMMISSION = "commission"
    CANCELLATION_FEE = "cancellation_fee"


RULE_TYPE_NAMES: dict[RuleType, str] = {
    RuleType.RESOURCE: "Resource Rule",
    RuleType.PRODUCT_SUB_TYPE: "Product Sub-Type Rule",
    RuleType.PRODUCT_TYPE: "Product Type Rule",
    RuleType.DEFAULT: "Default Rule",
}

PRIORITY_LABELS: dict[RuleType, str] = {
    RuleType.RESOURCE: "Highest (1/4) - Overrides all other rules",
    RuleType.PRODUCT_SUB_TYPE: "High (2/4) - Overrides product type and default",
    RuleType.PRODUCT_TYPE: "Medium (3/4) - Overrides default only",
    RuleType.DEFAULT: "Fallback (4/4) - Used when no other rules match",
}

RULE_SET_TYPE_NAMES: dict[RuleSetType, str] = {
    RuleSetType.REVENUE: "Revenue",
    RuleSetType.COMMISSION: "Commission",
    RuleSetType.CANCELLATION_FEE: "Cancellation Fee",
}
