"""
GL account model.

An account is the allocation target of a rule. Its external_id
is the ledger code in the downstream accounting system.
"""

from datetime import datetime

from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from gl_rules.models.base import Base


class Account(Base):
    """
    A single GL account.

    Accounts are never deleted, only flagged with deleted=True.
    Uniqueness of external_id among active accounts is checked
    by the AccountService, not by a database constraint, because
    a soft-deleted account may hold the same code.
    """

    __tablename__ = "gl_accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    external_id: Mapped[str] = mapped_column(
        String(100), nullable=False, index=True
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

    def __repr__(self) -> str:
        return f"<Account {self.external_id} {self.name}>"
