"""Ship service — creating and looking up ship sheets."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shipenergy.models.ship import Ship
from shipenergy.models.user import User


async def create_ship(
    db: AsyncSession,
    name: str,
    max_energy_points: int | None = None,
    created_by: User | None = None,
) -> Ship:
    """Create an empty ship; EP tokens are provisioned separately.

    Raises ValueError if max_energy_points is negative.
    """
    if max_energy_points is not None and max_energy_points < 0:
        raise ValueError(f"max_energy_points must be >= 0, got {max_energy_points}")
    ship = Ship(
        name=name,
        max_energy_points=max_energy_points,
        created_by_user_id=created_by.id if created_by else None,
    )
    db.add(ship)
    await db.flush()
    return ship


async def get_ship(db: AsyncSession, ship_id: int) -> Ship | None:
    return await db.get(Ship, ship_id)


async def list_ships(db: AsyncSession) -> list[Ship]:
    result = await db.execute(select(Ship).order_by(Ship.id))
    return list(result.scalars().all())
