"""
Rule set service: manages rule sets and answers the questions
that depend on them: does a date range overlap, which dates should
a new rule set default to, and which rule applies to a booking.

Rule sets are soft-deleted, and deleting one soft-deletes its rules.
"""

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from gl_rules.exceptions import (
    NotFoundError,
    RuleSetOverlapError,
)
from gl_rules.models.enums import RuleSetType, RULE_SET_TYPE_NAMES
from gl_rules.models.rule import Rule
from gl_rules.models.rule_set import RuleSet
from gl_rules.schemas.resolution import BookingClassification
from gl_rules.schemas.rule_set import RuleSetCreate, RuleSetUpdate
from gl_rules.services.default_dates import (
    DateRange,
    TimelineGap,
    calculate_default_dates,
)
from gl_rules.services.overlap import find_overlapping, validate_date_range
from gl_rules.services.priority import RulePriority
from gl_rules.services.resolver import resolve_rule
from gl_rules.services.rule_service import RuleService

logger = logging.getLogger(__name__)


class RuleSetService:

    def __init__(self, db: Session):
        self.db = db
        self.rule_service = RuleService(db)

    def list_rule_sets(
        self, rule_set_type: RuleSetType | None = None
    ) -> list[RuleSet]:
        """Active rule sets, earliest first, optionally of one type."""
        query = select(RuleSet).where(RuleSet.deleted.is_(False))
        if rule_set_type is not None:
            query = query.where(RuleSet.type == rule_set_type)

        rule_sets = self.db.execute(
            query.order_by(RuleSet.start_date, RuleSet.id)
        ).scalars().all()
        return list(rule_sets)

    def get_rule_set(self, rule_set_id: int) -> RuleSet:
        rule_set = self.db.get(RuleSet, rule_set_id)
        if not rule_set or rule_set.deleted:
            raise NotFoundError(f"Rule set {rule_set_id} not found")
        return rule_set

    def check_overlap(
        self,
        rule_set_type: RuleSetType,
        start_date: date,
        end_date: date,
        exclude_id: int | None = None,
    ) -> list[RuleSet]:
        """Return the rule sets of the same type that the range collides with."""
        return find_overlapping(
            rule_set_type,
            start_date,
            end_date,
            self.list_rule_sets(rule_set_type),
            exclude_id,
        )

    def _ensure_no_overlap(
        self,
        rule_set_type: RuleSetType,
        start_date: date,
        end_date: date,
        exclude_id: int | None = None,
    ) -> None:
        validate_date_range(start_date, end_date)

        conflicts = self.check_overlap(
            rule_set_type, start_date, end_date, exclude_id
        )
        if conflicts:
            type_name = RULE_SET_TYPE_NAMES[rule_set_type].lower()
            raise RuleSetOverlapError(
                f"This date range overlaps with an existing {type_name} "
                f"rule set. Please choose different dates."
            )

    def create_rule_set(self, request: RuleSetCreate) -> RuleSet:
        """
        Create a rule set.

        If copy_from_rule_set_id is given, the new rule set starts
        with a copy of that rule set's rules. The source must be of
        the same type.
        """
        self._ensure_no_overlap(
            request.type, request.start_date, request.end_date
        )

        if request.copy_from_rule_set_id is not None:
            self.rule_service.check_copy_source(
                request.copy_from_rule_set_id, request.type
            )

        rule_set = RuleSet(
            name=request.name.strip(),
            start_date=request.start_date,
            end_date=request.end_date,
            type=request.type,
        )
        self.db.add(rule_set)
        self.db.flush()
        logger.info(
            "Created %s rule set %s (%s to %s)",
            rule_set.type.value,
            rule_set.id,
            rule_set.start_date,
            rule_set.end_date,
        )

        if request.copy_from_rule_set_id is not None:
            self.rule_service.copy_rules(
                request.copy_from_rule_set_id, rule_set.id
            )

        return rule_set

    def update_rule_set(
        self, rule_set_id: int, request: RuleSetUpdate
    ) -> RuleSet:
        """Rename a rule set or move its dates. Its type never changes."""
        rule_set = self.get_rule_set(rule_set_id)

        start_date = request.start_date or rule_set.start_date
        end_date = request.end_date or rule_set.end_date

        if (start_date, end_date) != (rule_set.start_date, rule_set.end_date):
            self._ensure_no_overlap(
                rule_set.type, start_date, end_date, exclude_id=rule_set.id
            )

        if request.name is not None:
            rule_set.name = request.name.strip()
        rule_set.start_date = start_date
        rule_set.end_date = end_date

        self.db.flush()
        logger.info("Updated rule set %s", rule_set.id)
        return rule_set

    def delete_rule_set(self, rule_set_id: int) -> RuleSet:
        """Soft-delete a rule set together with its rules."""
        rule_set = self.get_rule_set(rule_set_id)
        rule_set.deleted = True

        rules = self.db.execute(
            select(Rule).where(
                Rule.gl_rule_set_id == rule_set_id,
                Rule.deleted.is_(False),
            )
        ).scalars().all()
        for rule in rules:
            rule.deleted = True

        self.db.flush()
        logger.info(
            "Deleted rule set %s and %d rules", rule_set.id, len(rules)
        )
        return rule_set

    def default_dates(
        self,
        rule_set_type: RuleSetType,
        selected_gap: TimelineGap | None = None,
        today: date | None = None,
    ) -> DateRange:
        """Suggest dates for a new rule set of this type."""
        return calculate_default_dates(
            selected_gap, self.list_rule_sets(rule_set_type), today
        )

    def find_active_rule_set(
        self, rule_set_type: RuleSetType, on_date: date
    ) -> RuleSet:
        """The rule set of this type whose range includes the date."""
        matches = self.db.execute(
            select(RuleSet)
            .where(
                RuleSet.type == rule_set_type,
                RuleSet.deleted.is_(False),
                RuleSet.start_date <= on_date,
                RuleSet.end_date >= on_date,
            )
            .order_by(RuleSet.start_date, RuleSet.id)
        ).scalars().all()

        if not matches:
            raise NotFoundError(
                f"No {RULE_SET_TYPE_NAMES[rule_set_type].lower()} "
                f"rule set is active on {on_date}"
            )
        if len(matches) > 1:
            logger.warning(
                "%d %s rule sets overlap on %s; using rule set %s",
                len(matches),
                rule_set_type.value,
                on_date,
                matches[0].id,
            )
        return matches[0]

    def resolve(
        self,
        rule_set_type: RuleSetType,
        on_date: date,
        booking: BookingClassification,
        priority: RulePriority | None = None,
    ) -> tuple[RuleSet, Rule]:
        """
        Find the rule that allocates a booking on a given date.

        Raises NotFoundError when no rule set of the type is active
        on that date, and NoDefaultRuleError when the active rule
        set cannot place the booking.
        """
        rule_set = self.find_active_rule_set(rule_set_type, on_date)
        rules = self.rule_service.list_rules(rule_set.id)
        rule = resolve_rule(rules, booking, priority)
        if rule.account.deleted:
            logger.warning(
                "Rule %s in rule set %s points at deleted account %s",
                rule.id,
                rule_set.id,
                rule.account_id,
            )
        logger.debug(
            "Booking %s on %s resolved to rule %s (account %s)",
            booking.model_dump(),
            on_date,
            rule.id,
            rule.account_id,
        )
        return rule_set, rule
