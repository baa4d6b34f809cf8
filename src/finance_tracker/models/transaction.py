"""Transaction model representing one recorded money movement."""
import datetime
from uuid import UUID

from sqlalchemy import BigInteger, Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finance_tracker.models.base import BaseModel


class Transaction(BaseModel):
    """Income or expense transaction. Amounts are stored in minor units (cents)."""

    __tablename__ = "transactions"

    type: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)
    category_id: Mapped[UUID] = mapped_column(
        ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    category: Mapped["Category"] = relationship(
        "Category", back_populates="transactions", lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<Transaction(id={self.id}, type={self.type}, amount={self.amount}, date={self.date})>"
