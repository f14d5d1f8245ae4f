"""
Rule service: manages the rules inside a rule set.

Write-time invariants enforced here:
- default rules have no target, every other rule has one
- a rule set holds at most one active default rule
- a rule set holds at most one active rule per (rule_type, target_id)
- the only default rule of a rule set cannot be deleted or retyped
- new and edited rules point at an active GL account; copies keep
  the account they were copied with
- rules are only copied between rule sets of the same type
"""

import logging
from typing import Iterable

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from gl_rules.exceptions import (
    DefaultRuleRequiredError,
    DuplicateRuleError,
    NotFoundError,
    RuleSetTypeMismatchError,
)
from gl_rules.models.account import Account
from gl_rules.models.enums import RuleSetType, RuleType, RULE_SET_TYPE_NAMES
from gl_rules.models.rule import Rule
from gl_rules.models.rule_set import RuleSet
from gl_rules.schemas.rule import RuleCreate, RuleUpdate

logger = logging.getLogger(__name__)


class RuleService:

    def __init__(self, db: Session):
        self.db = db

    def _get_rule_set(self, rule_set_id: int) -> RuleSet:
        rule_set = self.db.get(RuleSet, rule_set_id)
        if not rule_set or rule_set.deleted:
            raise NotFoundError(f"Rule set {rule_set_id} not found")
        return rule_set

    def _check_account(self, account_id: int) -> None:
        account = self.db.get(Account, account_id)
        if not account or account.deleted:
            raise NotFoundError(f"Account {account_id} not found")

    def _count_default_rules(
        self, rule_set_id: int, exclude_rule_id: int | None = None
    ) -> int:
        query = select(func.count(Rule.id)).where(
            Rule.gl_rule_set_id == rule_set_id,
            Rule.rule_type == RuleType.DEFAULT,
            Rule.deleted.is_(False),
        )
        if exclude_rule_id is not None:
            query = query.where(Rule.id != exclude_rule_id)
        return self.db.execute(query).scalar()

    def _check_unique(
        self,
        rule_set_id: int,
        rule_type: RuleType,
        target_id: int | None,
        exclude_rule_id: int | None = None,
    ) -> None:
        """Reject a second default rule or a repeated target."""
        if rule_type == RuleType.DEFAULT:
            if self._count_default_rules(rule_set_id, exclude_rule_id) > 0:
                raise DuplicateRuleError(
                    f"Rule set {rule_set_id} already has a default rule"
                )
            return

        query = select(Rule.id).where(
            Rule.gl_rule_set_id == rule_set_id,
            Rule.rule_type == rule_type,
            Rule.target_id == target_id,
            Rule.deleted.is_(False),
        )
        if exclude_rule_id is not None:
            query = query.where(Rule.id != exclude_rule_id)

        if self.db.execute(query.limit(1)).scalar_one_or_none() is not None:
            raise DuplicateRuleError(
                f"Rule set {rule_set_id} already has a "
                f"{rule_type.value} rule for target {target_id}"
            )

    def list_rules(self, rule_set_id: int) -> list[Rule]:
        """Active rules of a rule set, oldest first."""
        self._get_rule_set(rule_set_id)
        rules = self.db.execute(
            select(Rule)
            .where(
                Rule.gl_rule_set_id == rule_set_id,
                Rule.deleted.is_(False),
            )
            .order_by(Rule.id)
        ).scalars().all()
        return list(rules)

    def get_rule(self, rule_id: int) -> Rule:
        rule = self.db.get(Rule, rule_id)
        if not rule or rule.deleted:
            raise NotFoundError(f"Rule {rule_id} not found")
        return rule

    def has_default_rule(self, rule_set_id: int) -> bool:
        return self._count_default_rules(rule_set_id) > 0

    def create_rule(self, rule_set_id: int, request: RuleCreate) -> Rule:
        """Add a rule to a rule set."""
        self._get_rule_set(rule_set_id)
        self._check_account(request.account_id)
        return self._add_rule(
            rule_set_id, request.rule_type, request.target_id, request.account_id
        )

    def _add_rule(
        self,
        rule_set_id: int,
        rule_type: RuleType,
        target_id: int | None,
        account_id: int,
    ) -> Rule:
        self._check_unique(rule_set_id, rule_type, target_id)

        rule = Rule(
            gl_rule_set_id=rule_set_id,
            rule_type=rule_type,
            target_id=target_id,
            account_id=account_id,
        )
        self.db.add(rule)
        self.db.flush()
        logger.info(
            "Created %s rule %s in rule set %s (target=%s, account=%s)",
            rule.rule_type.value,
            rule.id,
            rule_set_id,
            rule.target_id,
            rule.account_id,
        )
        return rule

    def bulk_create_rules(
        self, rule_set_id: int, requests: Iterable[RuleCreate]
    ) -> list[Rule]:
        """Create several rules in one go, stopping at the first invalid one."""
        return [self.create_rule(rule_set_id, request) for request in requests]

    def update_rule(self, rule_id: int, request: RuleUpdate) -> Rule:
        """
        Change a rule's type, target or account.

        Fields left out of the request keep their current values.
        Switching to the default type clears the target.
        """
        rule = self.get_rule(rule_id)
        changes = request.model_dump(exclude_unset=True)

        rule_type = changes.get("rule_type") or rule.rule_type
        target_id = changes.get("target_id", rule.target_id)
        account_id = changes.get("account_id") or rule.account_id

        if rule_type == RuleType.DEFAULT:
            target_id = None
        elif target_id is None:
            raise ValueError(f"{rule_type.value} rules require a target_id")

        if (rule.rule_type == RuleType.DEFAULT
                and rule_type != RuleType.DEFAULT
                and self._count_default_rules(rule.gl_rule_set_id, rule.id) == 0):
            raise DefaultRuleRequiredError(
                "Cannot change the type of the only default rule"
            )

        if account_id != rule.account_id:
            self._check_account(account_id)

        if (rule_type, target_id) != (rule.rule_type, rule.target_id):
            self._check_unique(rule.gl_rule_set_id, rule_type, target_id, rule.id)

        rule.rule_type = rule_type
        rule.target_id = target_id
        rule.account_id = account_id
        self.db.flush()
        logger.info("Updated rule %s", rule.id)
        return rule

    def delete_rule(self, rule_id: int) -> Rule:
        """Soft-delete a rule. The only default rule cannot be deleted."""
        rule = self.get_rule(rule_id)

        if (rule.rule_type == RuleType.DEFAULT
                and self._count_default_rules(rule.gl_rule_set_id, rule.id) == 0):
            raise DefaultRuleRequiredError("Cannot delete the default rule")

        rule.deleted = True
        self.db.flush()
        logger.info("Deleted rule %s from rule set %s", rule.id, rule.gl_rule_set_id)
        return rule

    def check_copy_source(
        self, source_rule_set_id: int, target_type: RuleSetType
    ) -> RuleSet:
        """The rule set to copy from. It must be active and of the same type."""
        source = self._get_rule_set(source_rule_set_id)
        if source.type != target_type:
            raise RuleSetTypeMismatchError(
                f"Rule set {source.id} is a {RULE_SET_TYPE_NAMES[source.type].lower()} "
                f"rule set; rules can only be copied from a "
                f"{RULE_SET_TYPE_NAMES[target_type].lower()} rule set"
            )
        return source

    def copy_rules(
        self, source_rule_set_id: int, target_rule_set_id: int
    ) -> list[Rule]:
        """
        Copy every active rule of one rule set into another.

        rule_type, target_id and account_id are kept as stored, even
        when the account has since been deleted; the copies get new
        ids and timestamps. Both rule sets must be of the same type.
        """
        target = self._get_rule_set(target_rule_set_id)
        self.check_copy_source(source_rule_set_id, target.type)

        copies = [
            self._add_rule(
                target_rule_set_id, rule.rule_type, rule.target_id, rule.account_id
            )
            for rule in self.list_rules(source_rule_set_id)
        ]
        logger.info(
            "Copied %d rules from rule set %s to rule set %s",
            len(copies),
            source_rule_set_id,
            target_rule_set_id,
        )
        return copies
