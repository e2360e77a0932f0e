from shipenergy.models.base import Base  # noqa: F401
from shipenergy.models.crew_member import CrewMember, CrewPosition, PermissionLevel  # noqa: F401
from shipenergy.models.ship import Ship  # noqa: F401
from shipenergy.models.ship_item import ENERGY_POINT_TOKEN, ShipItem  # noqa: F401
from shipenergy.models.user import User  # noqa: F401
