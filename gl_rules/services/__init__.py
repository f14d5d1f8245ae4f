"""Business logic services."""

from gl_rules.services.account_service import AccountService
from gl_rules.services.rule_service import RuleService
from gl_rules.services.rule_set_service import RuleSetService

__all__ = ["AccountService", "RuleService", "RuleSetService"]
