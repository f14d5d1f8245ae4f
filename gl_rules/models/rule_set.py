"""
Rule set model.

A rule set is a named, typed container of rules that is active
for an inclusive range of calendar dates. Rule sets of the same
type must never overlap; different types are independent lanes.
"""

from datetime import date, datetime

from sqlalchemy import String, Boolean, Date, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gl_rules.models.base import Base
from gl_rules.models.enums import RuleSetType


class RuleSet(Base):
    __tablename__ = "gl_rule_sets"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    type: Mapped[RuleSetType] = mapped_column(
        SAEnum(
            RuleSetType,
            name="gl_rule_set_type_enum",
            create_constraint=True,
        ),
        nullable=False,
        index=True,
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

    # Includes soft-deleted rules; filter on Rule.deleted when reading
    rules: Mapped[list["Rule"]] = relationship(
        back_populates="rule_set", order_by="Rule.id"
    )

    def contains(self, on_date: date) -> bool:
        """True if the date falls inside the inclusive range."""
        return self.start_date <= on_date <= self.end_date

    def __repr__(self) -> str:
        return (
            f"<RuleSet {self.name} {self.type.value} "
            f"{self.start_date}..{self.end_date}>"
        )
