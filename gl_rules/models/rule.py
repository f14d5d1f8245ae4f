"""
GL rule model.

A rule maps one target (a resource, product type or product
sub-type) to a GL account. The default rule has no target and
catches everything the other rules do not.
"""

from datetime import datetime

from sqlalchemy import (
    Integer, Boolean, DateTime, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gl_rules.models.base import Base
from gl_rules.models.enums import RuleType


class Rule(Base):
    """
    A single rule inside a rule set.

    target_id is NULL for default rules and required for every
    other rule type. The RuleService enforces this, together with
    "one default per rule set" and "one rule per target".
    """

    __tablename__ = "gl_rules"

    id: Mapped[int] = mapped_column(primary_key=True)
    gl_rule_set_id: Mapped[int] = mapped_column(
        ForeignKey("gl_rule_sets.id"), nullable=False, index=True
    )
    rule_type: Mapped[RuleType] = mapped_column(
        SAEnum(
            RuleType,
            name="gl_rule_type_enum",
            create_constraint=True,
        ),
        nullable=False,
    )
    target_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("gl_accounts.id"), nullable=False, index=True
    )
    deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    rule_set: Mapped["RuleSet"] = relationship(back_populates="rules")
    account: Mapped["Account"] = relationship()

    @property
    def account_name(self) -> str | None:
        return self.account.name if self.account else None

    @property
    def account_external_id(self) -> str | None:
        return self.account.external_id if self.account else None

    def __repr__(self) -> str:
        return (
            f"<Rule {self.rule_type.value} target={self.target_id} "
            f"account={self.account_id}>"
        )
