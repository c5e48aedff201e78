import uuid
from datetime import datetime
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smart_inventory.database import Base, utcnow

# Labels used when an item has no storage / unit attached
UNASSIGNED_STORAGE = "No Storage"
UNASSIGNED_UOM = ""


class StockStatus(str, PyEnum):
    OUT_OF_STOCK = "Out of Stock"
    LOW_STOCK = "Low Stock"
    OVER_STOCK = "Over Stock"
    IN_STOCK = "In Stock"


def generate_sku() -> str:
    return f"SKU-{uuid.uuid4().hex[:6].upper()}"


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    sku: Mapped[str] = mapped_column(String, index=True, default=generate_sku)
    barcode: Mapped[str] = mapped_column(String, default="")

    # Not clamped: negative quantities and min > max are accepted as entered
    current_quantity: Mapped[float] = mapped_column(Float, default=0.0)
    min_quantity: Mapped[float] = mapped_column(Float, default=0.0)
    max_quantity: Mapped[float] = mapped_column(Float, default=0.0)
    unit_cost: Mapped[float] = mapped_column(Float, default=0.0)

    # Manual flag, independent of quantity
    is_out_of_stock: Mapped[bool] = mapped_column(Boolean, default=False)

    storage_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("storages.id", ondelete="CASCADE"), nullable=True, index=True
    )
    uom_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("units_of_measure.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    storage: Mapped[Optional["Storage"]] = relationship("Storage", back_populates="items")
    uom: Mapped[Optional["UnitOfMeasure"]] = relationship("UnitOfMeasure")
    count_history: Mapped[list["CountAdjustment"]] = relationship(
        "CountAdjustment",
        back_populates="item",
        cascade="all, delete-orphan",
        order_by="CountAdjustment.sequence",
    )

    @property
    def is_low_stock(self) -> bool:
        return self.current_quantity <= self.min_quantity

    @property
    def is_over_stock(self) -> bool:
        return self.current_quantity >= self.max_quantity and self.max_quantity > 0

    @property
    def total_value(self) -> float:
        return self.current_quantity * self.unit_cost

    @property
    def stock_status(self) -> StockStatus:
        if self.is_out_of_stock:
            return StockStatus.OUT_OF_STOCK
        if self.is_low_stock:
            return StockStatus.LOW_STOCK
        if self.is_over_stock:
            return StockStatus.OVER_STOCK
        return StockStatus.IN_STOCK

    @property
    def storage_name(self) -> str:
        return self.storage.name if self.storage is not None else UNASSIGNED_STORAGE

    @property
    def uom_symbol(self) -> str:
        return self.uom.symbol if self.uom is not None else UNASSIGNED_UOM

