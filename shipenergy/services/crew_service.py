"""Crew service — crew membership, positions and per-user permissions."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shipenergy.models.crew_member import CrewMember, CrewPosition, PermissionLevel
from shipenergy.models.ship import Ship

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Permission helpers
# ---------------------------------------------------------------------------

def permission_level(permission: dict | None, user_id: int) -> int:
    """Return the user's level on an entity, falling back to its default."""
    if not permission:
        return PermissionLevel.NONE
    level = permission.get(str(user_id), permission.get("default", PermissionLevel.NONE))
    return int(level)


def has_owner_permission(permission: dict | None, user_id: int) -> bool:
    return permission_level(permission, user_id) >= PermissionLevel.OWNER


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

async def get_crew_for_ship(db: AsyncSession, ship_id: int) -> list[CrewMember]:
    result = await db.execute(
        select(CrewMember).where(CrewMember.ship_id == ship_id).order_by(CrewMember.id)
    )
    return list(result.scalars().all())


async def get_entity_by_id(db: AsyncSession, crew_id: int) -> CrewMember | None:
    return await db.get(CrewMember, crew_id)


async def get_crew_member_on_ship(
    db: AsyncSession, ship_id: int, crew_id: int
) -> CrewMember | None:
    """Return the crew member only if they serve on ship_id."""
    member = await get_entity_by_id(db, crew_id)
    if member is None or member.ship_id != ship_id:
        return None
    return member


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

async def add_crew_member(
    db: AsyncSession,
    ship_id: int,
    name: str,
    position: CrewPosition = CrewPosition.unassigned,
    owner_user_id: int | None = None,
) -> CrewMember:
    """Add a crew member to the ship; owner_user_id, if given, gets OWNER permission.

    Raises ValueError if the ship does not exist.
    """
    if await db.get(Ship, ship_id) is None:
        raise ValueError(f"Ship {ship_id} not found")
    permission: dict[str, int] = {"default": int(PermissionLevel.NONE)}
    if owner_user_id is not None:
        permission[str(owner_user_id)] = int(PermissionLevel.OWNER)
    member = CrewMember(ship_id=ship_id, name=name, position=position, permission=permission)
    db.add(member)
    await db.flush()
    logger.info("Crew member %s (%s) joined ship %s", member.id, position.value, ship_id)
    return member


async def set_crew_position(
    db: AsyncSession, member: CrewMember, position: CrewPosition
) -> CrewMember:
    member.position = position
    await db.flush()
    return member

