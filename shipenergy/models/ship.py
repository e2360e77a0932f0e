"""Ship model — a vehicle entity that owns a pool of Energy Point tokens."""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from shipenergy.models.base import Base


class Ship(Base):
    """A ship sheet.

    max_energy_points is NULL (or 0) when the ship uses the global maximum
    from settings instead of its own cap.
    """

    __tablename__ = "ships"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    max_energy_points: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)
    created_by_user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id"), nullable=True
    )
