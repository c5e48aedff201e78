import uuid
from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smart_inventory.database import Base, utcnow


class AdjustmentType(str, PyEnum):
    INCREASE = "Increase"
    DECREASE = "Decrease"
    NO_CHANGE = "No Change"


class CountAdjustment(Base):
    """One physical count reconciled against an item. Written once, never edited."""

    __tablename__ = "count_adjustments"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    item_id: Mapped[str] = mapped_column(
        String, ForeignKey("inventory_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    previous_quantity: Mapped[float] = mapped_column(Float, nullable=False)
    counted_quantity: Mapped[float] = mapped_column(Float, nullable=False)
    adjustment_reason: Mapped[str] = mapped_column(String, nullable=False)
    notes: Mapped[str] = mapped_column(Text, default="")
    count_date: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    counted_by: Mapped[str] = mapped_column(String, default="User")
    # 1-based position in the item's ledger; count_date alone can tie
    sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    item: Mapped["InventoryItem"] = relationship("InventoryItem", back_populates="count_history")

    @property
    def variance(self) -> float:
        return self.counted_quantity - self.previous_quantity

    @property
    def variance_percentage(self) -> float:
        if self.previous_quantity <= 0:
            return 0.0
        return self.variance / self.previous_quantity * 100

    @property
    def adjustment_type(self) -> AdjustmentType:
        if self.variance > 0:
            return AdjustmentType.INCREASE
        if self.variance < 0:
            return AdjustmentType.DECREASE
        return AdjustmentType.NO_CHANGE
