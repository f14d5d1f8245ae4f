"""
Tests for the RuleService write-time invariants.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from gl_rules.exceptions import (
    DefaultRuleRequiredError,
    DuplicateRuleError,
    NotFoundError,
    RuleSetTypeMismatchError,
)
from gl_rules.models.enums import RuleSetType, RuleType
from gl_rules.schemas.account import AccountCreate
from gl_rules.schemas.rule import RuleCreate, RuleUpdate
from gl_rules.schemas.rule_set import RuleSetCreate
from gl_rules.services.account_service import AccountService
from gl_rules.services.rule_service import RuleService
from gl_rules.services.rule_set_service import RuleSetService


@pytest.fixture
def account(db_session):
    account = AccountService(db_session).create_account(AccountCreate(
        name="Ferry Revenue", external_id="4000",
    ))
    db_session.commit()
    return account


@pytest.fixture
def rule_set(db_session):
    rule_set = RuleSetService(db_session).create_rule_set(RuleSetCreate(
        name="FY2024",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31),
        type=RuleSetType.REVENUE,
    ))
    db_session.commit()
    return rule_set


def add_default(service, rule_set, account):
    return service.create_rule(rule_set.id, RuleCreate(
        rule_type=RuleType.DEFAULT, account_id=account.id,
    ))


class TestRuleSchema:

    def test_default_rule_must_not_have_target(self):
        with pytest.raises(ValidationError, match="must not have a target_id"):
            RuleCreate(rule_type=RuleType.DEFAULT, target_id=5, account_id=1)

    @pytest.mark.parametrize("rule_type", [
        RuleType.RESOURCE,
        RuleType.PRODUCT_SUB_TYPE,
        RuleType.PRODUCT_TYPE,
    ])
    def test_targeted_rules_need_target(self, rule_type):
        with pytest.raises(ValidationError, match="require a target_id"):
            RuleCreate(rule_type=rule_type, account_id=1)


class TestCreateRule:

    def test_create_default_rule(self, db_session, rule_set, account):
        service = RuleService(db_session)
        rule = add_default(service, rule_set, account)
        db_session.commit()

        assert rule.id is not None
        assert rule.target_id is None
        assert service.has_default_rule(rule_set.id) is True

    def test_second_default_rejected(self, db_session, rule_set, account):
        service = RuleService(db_session)
        add_default(service, rule_set, account)
        db_session.commit()

        with pytest.raises(DuplicateRuleError, match="already has a default rule"):
            add_default(service, rule_set, account)

    def test_duplicate_target_rejected(self, db_session, rule_set, account):
        service = RuleService(db_session)
        request = RuleCreate(
            rule_type=RuleType.RESOURCE, target_id=7, account_id=account.id,
        )
        service.create_rule(rule_set.id, request)
        db_session.commit()

        with pytest.raises(DuplicateRuleError, match="resource rule for target 7"):
            service.create_rule(rule_set.id, request)

    def test_same_target_different_type_allowed(self, db_session, rule_set, account):
        service = RuleService(db_session)
        service.create_rule(rule_set.id, RuleCreate(
            rule_type=RuleType.PRODUCT_TYPE, target_id=7, account_id=account.id,
        ))
        rule = service.create_rule(rule_set.id, RuleCreate(
            rule_type=RuleType.PRODUCT_SUB_TYPE, target_id=7, account_id=account.id,
        ))
        assert rule.id is not None

    def test_deleted_account_rejected(self, db_session, rule_set, account):
        AccountService(db_session).delete_account(account.id)
        db_session.commit()

        with pytest.raises(NotFoundError, match="Account"):
            add_default(RuleService(db_session), rule_set, account)

    def test_unknown_rule_set_rejected(self, db_session, account):
        with pytest.raises(NotFoundError, match="Rule set 999"):
            RuleService(db_session).create_rule(999, RuleCreate(
                rule_type=RuleType.DEFAULT, account_id=account.id,
            ))


    def test_bulk_create(self, db_session, rule_set, account):
        service = RuleService(db_session)
        rules = service.bulk_create_rules(rule_set.id, [
            RuleCreate(rule_type=RuleType.DEFAULT, account_id=account.id),
            RuleCreate(
                rule_type=RuleType.RESOURCE, target_id=4, account_id=account.id,
            ),
        ])

        assert [r.rule_type for r in rules] == [RuleType.DEFAULT, RuleType.RESOURCE]
        assert len(service.list_rules(rule_set.id)) == 2

    def test_bulk_create_stops_at_invalid_rule(self, db_session, rule_set, account):
        service = RuleService(db_session)
        with pytest.raises(DuplicateRuleError):
            service.bulk_create_rules(rule_set.id, [
                RuleCreate(rule_type=RuleType.DEFAULT, account_id=account.id),
                RuleCreate(rule_type=RuleType.DEFAULT, account_id=account.id),
            ])

class TestUpdateRule:

    def test_change_account(self, db_session, rule_set, account):
        other = AccountService(db_session).create_account(AccountCreate(
            name="Bus Revenue", external_id="4100",
        ))
        service = RuleService(db_session)
        rule = add_default(service, rule_set, account)
        db_session.commit()

        service.update_rule(rule.id, RuleUpdate(account_id=other.id))
        db_session.commit()
        assert rule.account_id == other.id

    def test_change_target(self, db_session, rule_set, account):
        service = RuleService(db_session)
        rule = service.create_rule(rule_set.id, RuleCreate(
            rule_type=RuleType.RESOURCE, target_id=1, account_id=account.id,
        ))
        service.update_rule(rule.id, RuleUpdate(target_id=2))
        assert rule.target_id == 2

    def test_retarget_onto_existing_rejected(self, db_session, rule_set, account):
        service = RuleService(db_session)
        service.create_rule(rule_set.id, RuleCreate(
            rule_type=RuleType.RESOURCE, target_id=1, account_id=account.id,
        ))
        second = service.create_rule(rule_set.id, RuleCreate(
            rule_type=RuleType.RESOURCE, target_id=2, account_id=account.id,
        ))

        with pytest.raises(DuplicateRuleError):
            service.update_rule(second.id, RuleUpdate(target_id=1))

    def test_switch_to_default_clears_target(self, db_session, rule_set, account):
        service = RuleService(db_session)
        rule = service.create_rule(rule_set.id, RuleCreate(
            rule_type=RuleType.PRODUCT_TYPE, target_id=4, account_id=account.id,
        ))
        service.update_rule(rule.id, RuleUpdate(rule_type=RuleType.DEFAULT))

        assert rule.rule_type == RuleType.DEFAULT
        assert rule.target_id is None

    def test_only_default_cannot_be_retyped(self, db_session, rule_set, account):
        service = RuleService(db_session)
        rule = add_default(service, rule_set, account)

        with pytest.raises(DefaultRuleRequiredError):
            service.update_rule(rule.id, RuleUpdate(
                rule_type=RuleType.RESOURCE, target_id=3,
            ))

    def test_targeted_rule_without_target_rejected(self, db_session, rule_set, account):
        service = RuleService(db_session)
        rule = service.create_rule(rule_set.id, RuleCreate(
            rule_type=RuleType.RESOURCE, target_id=1, account_id=account.id,
        ))
        with pytest.raises(ValueError, match="require a target_id"):
            service.update_rule(rule.id, RuleUpdate(target_id=None))


class TestDeleteRule:

    def test_delete_targeted_rule(self, db_session, rule_set, account):
        service = RuleService(db_session)
        add_default(service, rule_set, account)
        rule = service.create_rule(rule_set.id, RuleCreate(
            rule_type=RuleType.RESOURCE, target_id=1, account_id=account.id,
        ))
        db_session.commit()

        service.delete_rule(rule.id)
        db_session.commit()

        assert rule.deleted is True
        assert [r.rule_type for r in service.list_rules(rule_set.id)] == [
            RuleType.DEFAULT
        ]

    def test_only_default_cannot_be_deleted(self, db_session, rule_set, account):
        service = RuleService(db_session)
        rule = add_default(service, rule_set, account)
        db_session.commit()

        with pytest.raises(DefaultRuleRequiredError):
            service.delete_rule(rule.id)

    def test_deleted_rule_frees_its_target(self, db_session, rule_set, account):
        service = RuleService(db_session)
        request = RuleCreate(
            rule_type=RuleType.RESOURCE, target_id=1, account_id=account.id,
        )
        rule = service.create_rule(rule_set.id, request)
        service.delete_rule(rule.id)

        assert service.create_rule(rule_set.id, request).id != rule.id


class TestCopyRules:

    def test_copy_into_empty_rule_set(self, db_session, rule_set, account):
        service = RuleService(db_session)
        add_default(service, rule_set, account)
        service.create_rule(rule_set.id, RuleCreate(
            rule_type=RuleType.PRODUCT_SUB_TYPE, target_id=8, account_id=account.id,
        ))
        target = RuleSetService(db_session).create_rule_set(RuleSetCreate(
            name="FY2025",
            start_date=date(2025, 1, 1),
            end_date=date(2025, 12, 31),
        ))
        db_session.commit()

        copies = service.copy_rules(rule_set.id, target.id)
        db_session.commit()

        assert len(copies) == 2
        assert service.has_default_rule(target.id)

    def test_copy_into_populated_rule_set_rejects_duplicates(
        self, db_session, rule_set, account
    ):
        service = RuleService(db_session)
        add_default(service, rule_set, account)
        db_session.commit()

        with pytest.raises(DuplicateRuleError):
            service.copy_rules(rule_set.id, rule_set.id)

    def test_copy_keeps_rule_on_deleted_account(self, db_session, rule_set, account):
        retired = AccountService(db_session).create_account(AccountCreate(
            name="Old Ferry Revenue", external_id="4999",
        ))
        service = RuleService(db_session)
        add_default(service, rule_set, account)
        service.create_rule(rule_set.id, RuleCreate(
            rule_type=RuleType.RESOURCE, target_id=3, account_id=retired.id,
        ))
        AccountService(db_session).delete_account(retired.id)
        target = RuleSetService(db_session).create_rule_set(RuleSetCreate(
            name="FY2025",
            start_date=date(2025, 1, 1),
            end_date=date(2025, 12, 31),
        ))

        copies = service.copy_rules(rule_set.id, target.id)

        assert [(r.rule_type, r.account_id) for r in copies] == [
            (RuleType.DEFAULT, account.id),
            (RuleType.RESOURCE, retired.id),
        ]

    def test_copy_between_types_rejected(self, db_session, rule_set, account):
        service = RuleService(db_session)
        add_default(service, rule_set, account)
        commission = RuleSetService(db_session).create_rule_set(RuleSetCreate(
            name="Commission 2024",
            start_date=date(2024, 1, 1),
            end_date=date(2024, 12, 31),
            type=RuleSetType.COMMISSION,
        ))

        with pytest.raises(RuleSetTypeMismatchError):
            service.copy_rules(rule_set.id, commission.id)
        assert service.list_rules(commission.id) == []
