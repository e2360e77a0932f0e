"""ShipItem model — generic embedded record attached to a ship."""

from sqlalchemy import ForeignKey, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from shipenergy.models.base import Base

ENERGY_POINT_TOKEN = "energyPointToken"


class ShipItem(Base):
    """One embedded record owned by a ship.

    item_type discriminates the record kind (e.g. "energyPointToken"); the
    type-specific fields live in the system JSON dict and are updated by
    shallow merge.
    """

    __tablename__ = "ship_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, index=True)
    ship_id: Mapped[int] = mapped_column(
        ForeignKey("ships.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    item_type: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    system: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
