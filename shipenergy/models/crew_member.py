import enum

from sqlalchemy import Enum, ForeignKey, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from shipenergy.models.base import Base


class CrewPosition(str, enum.Enum):
    captain = "captain"
    pilot = "pilot"
    sensor_operator = "sensor_operator"
    gunner = "gunner"
    engineer = "engineer"
    unassigned = "unassigned"


class PermissionLevel(enum.IntEnum):
    NONE = 0
    LIMITED = 1
    OBSERVER = 2
    OWNER = 3


class CrewMember(Base):
    """A character serving on a ship.

    permission maps str(user_id) (or "default") to a PermissionLevel value.
    """

    __tablename__ = "crew_members"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    ship_id: Mapped[int] = mapped_column(ForeignKey("ships.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    position: Mapped[CrewPosition] = mapped_column(
        Enum(CrewPosition), nullable=False, default=CrewPosition.unassigned
    )
    permission: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
