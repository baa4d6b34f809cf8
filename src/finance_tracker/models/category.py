"""Category model grouping transactions by income or expense purpose."""

from sqlalchemy import Boolean, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finance_tracker.models.base import BaseModel


class Category(BaseModel):
    """Income or expense category; (type, name) is unique."""

    __tablename__ = "categories"

    type: Mapped[str] = mapped_column(String(10), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        UniqueConstraint("type", "name", name="uq_categories_type_name"),
    )

    # Rely on DB-level ON DELETE RESTRICT; do not cascade transaction deletes from here.
    transactions: Mapped[list["Transaction"]] = relationship(
        "Transaction", back_populates="category", passive_deletes="all"
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, type={self.type}, name={self.name})>"
