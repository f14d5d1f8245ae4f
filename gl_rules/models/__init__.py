"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from gl_rules.models.base import Base
from gl_rules.models.enums import RuleType, RuleSetType
from gl_rules.models.account import Account
from gl_rules.models.rule_set import RuleSet
from gl_rules.models.rule import Rule

__all__ = [
    "Base",
    "RuleType",
    "RuleSetType",
    "Account",
    "RuleSet",
    "Rule",
]
