import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smart_inventory.database import Base, utcnow

DEFAULT_COLOR = "#007AFF"


class Storage(Base):
    __tablename__ = "storages"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String, nullable=False)
    location: Mapped[str] = mapped_column(String, default="")
    description: Mapped[str] = mapped_column(Text, default="")
    color: Mapped[str] = mapped_column(String, default=DEFAULT_COLOR)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    items: Mapped[list["InventoryItem"]] = relationship(
        "InventoryItem", back_populates="storage", cascade="all, delete-orphan"
    )

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def total_quantity(self) -> float:
        return sum(item.current_quantity for item in self.items)

    @property
    def total_value(self) -> float:
        return sum(item.total_value for item in self.items)

    @property
    def low_stock_count(self) -> int:
        return sum(1 for item in self.items if item.is_low_stock)
