"""Energy Point token service — the store-facing side of EP allocation.

Responsibilities:
  - Provision blank EP tokens on a ship
  - Set how many of the ship's tokens are active (full reset to the ship pool)
  - Move active tokens between the ship pool and crew members
  - Answer holder queries (ship pool size, per-crew counts)
  - Resolve the EP cap and who may change EP on a ship

Every mutation reads the token set once, computes the next state with
ep_allocation, and writes it back with a single update_embedded_records call.
Concurrent mutations on the same ship are last-writer-wins.
"""

import logging
import secrets
from typing import Any, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from shipenergy.config import SETTINGS_NAMESPACE, get_setting
from shipenergy.models.crew_member import CrewMember, CrewPosition
from shipenergy.models.ship import Ship
from shipenergy.models.ship_item import ENERGY_POINT_TOKEN, ShipItem
from shipenergy.models.user import User
from shipenergy.services import ep_allocation
from shipenergy.services.crew_service import (
    get_crew_for_ship,
    get_crew_member_on_ship,
    get_entity_by_id,
    has_owner_permission,
)
from shipenergy.services.entity_store import (
    create_embedded_records,
    list_embedded_records_by_type,
    update_embedded_records,
)
from shipenergy.services.ep_allocation import TokenState, crew_holder_id, ship_holder_id

logger = logging.getLogger(__name__)

TOKEN_NAME_PREFIX = "epk"


# ---------------------------------------------------------------------------
# Loading and writing token state
# ---------------------------------------------------------------------------

def _to_state(item: ShipItem) -> TokenState:
    return TokenState(
        id=item.id,
        active=bool(item.system.get("active", False)),
        holder=item.system.get("holder"),
    )


async def get_ep_tokens(db: AsyncSession, ship: Ship) -> list[ShipItem]:
    """All EP tokens on the ship regardless of active state or holder."""
    return await list_embedded_records_by_type(db, ship.id, ENERGY_POINT_TOKEN)


async def get_ep_token_states(db: AsyncSession, ship: Ship) -> list[TokenState]:
    return [_to_state(item) for item in await get_ep_tokens(db, ship)]


def _patch(token: TokenState, include_active: bool = True) -> dict[str, Any]:
    system: dict[str, Any] = {"holder": token.holder}
    if include_active:
        system["active"] = token.active
    return {"_id": token.id, "system": system}


# ---------------------------------------------------------------------------
# Provisioning and activation
# ---------------------------------------------------------------------------

async def create_blank_ep_tokens(
    db: AsyncSession, ship: Ship, count: int
) -> list[ShipItem]:
    """Create ``count`` inactive tokens held by the ship; existing tokens are untouched."""
    ep_allocation.validate_count(count, "count")
    specs = [
        {
            "name": TOKEN_NAME_PREFIX + secrets.token_hex(8),
            "type": ENERGY_POINT_TOKEN,
            "system": {"active": False, "holder": ship_holder_id(ship.id)},
        }
        for _ in range(count)
    ]
    created = await create_embedded_records(db, ship.id, specs)
    logger.info("Created %d blank EP tokens on ship %s", len(created), ship.id)
    return created


async def set_active_ep_tokens(db: AsyncSession, ship: Ship, active_count: int) -> None:
    """Activate the first ``active_count`` tokens and return all tokens to the ship.

    Any tokens held by crew members go back to the ship pool as a side effect.
    Tokens are not minted here; see create_blank_ep_tokens.
    """
    ep_allocation.validate_count(active_count, "active_count")
    tokens = await get_ep_token_states(db, ship)
    new_state = ep_allocation.reset_active(tokens, ship_holder_id(ship.id), active_count)
    await update_embedded_records(db, ship.id, [_patch(t) for t in new_state])
    if active_count > len(tokens):
        logger.warning(
            "Ship %s asked for %d active EP tokens but only has %d",
            ship.id, active_count, len(tokens),
        )
    logger.info(
        "Ship %s EP reset: %d of %d tokens active",
        ship.id, min(active_count, len(tokens)), len(tokens),
    )


# ---------------------------------------------------------------------------
# Holder queries
# ---------------------------------------------------------------------------

async def ship_ep_count(db: AsyncSession, ship: Ship) -> int:
    """Active tokens currently held by the ship itself."""
    tokens = await get_ep_token_states(db, ship)
    return ep_allocation.ship_token_count(tokens, ship_holder_id(ship.id))


async def crew_ep_count(db: AsyncSession, ship: Ship, crew_id: int) -> int:
    """Active tokens currently held by the crew member."""
    tokens = await get_ep_token_states(db, ship)
    return ep_allocation.crew_token_count(tokens, crew_holder_id(crew_id))


async def crew_has_tokens(db: AsyncSession, ship: Ship) -> bool:
    tokens = await get_ep_token_states(db, ship)
    return ep_allocation.crew_holds_any(tokens, ship_holder_id(ship.id))


# ---------------------------------------------------------------------------
# Crew allocation
# ---------------------------------------------------------------------------

async def _write_holders(
    db: AsyncSession, ship: Ship, new_state: list[TokenState]
) -> None:
    active = ep_allocation.active_tokens(new_state)
    await update_embedded_records(
        db, ship.id, [_patch(t, include_active=False) for t in active]
    )


async def set_crew_ep_count(
    db: AsyncSession, ship: Ship, crew_id: int, count: int
) -> int:
    """Make the crew member hold ``count`` active tokens, or as many as the ship has.

    The crew member's current tokens are reclaimed first, so their own tokens
    count toward what is available.  Returns the number actually granted.

    Raises ValueError if count is negative or the crew member is not on the ship.
    """
    ep_allocation.validate_count(count, "count")
    if await get_crew_member_on_ship(db, ship.id, crew_id) is None:
        raise ValueError(f"Crew member {crew_id} does not serve on ship {ship.id}")

    tokens = await get_ep_token_states(db, ship)
    holder = crew_holder_id(crew_id)
    new_state = ep_allocation.allocate_to_crew(tokens, ship_holder_id(ship.id), holder, count)
    await _write_holders(db, ship, new_state)

    granted = ep_allocation.crew_token_count(new_state, holder)
    if granted < count:
        logger.warning(
            "Crew %s on ship %s requested %d EP, only %d available",
            crew_id, ship.id, count, granted,
        )
    logger.info(
        "Crew %s on ship %s now holds %d EP (%d tokens moved)",
        crew_id, ship.id, granted, len(ep_allocation.changed_tokens(tokens, new_state)),
    )
    return granted


async def return_crew_tokens_to_ship(db: AsyncSession, ship: Ship, crew_id: int) -> None:
    """Hand a crew member's active tokens back to the ship pool.

    Does not check crew membership, so it also cleans up after a departed member.
    """
    tokens = await get_ep_token_states(db, ship)
    holder = crew_holder_id(crew_id)
    if ep_allocation.crew_token_count(tokens, holder) == 0:
        return
    new_state = ep_allocation.return_holder_to_ship(tokens, ship_holder_id(ship.id), holder)
    await _write_holders(db, ship, new_state)


# ---------------------------------------------------------------------------
# Limits and permissions
# ---------------------------------------------------------------------------

def get_max_allowed_ep_tokens(
    ship: Ship, get_setting: Callable[[str, str], Any] = get_setting
) -> int:
    """The most EP tokens the ship may have active.

    A ship-specific cap wins; otherwise the global setting applies.
    """
    if ship.max_energy_points:
        return ship.max_energy_points
    return get_setting(SETTINGS_NAMESPACE, "max_ep_tokens_allowed")


async def can_change_ep_for_ship(db: AsyncSession, ship: Ship, current_user: User) -> bool:
    """Admins, and users who own an engineer serving on the ship, may change EP."""
    if current_user.is_admin:
        return True
    crew = await get_crew_for_ship(db, ship.id)
    engineers = [c for c in crew if c.position == CrewPosition.engineer]
    for engineer in engineers:
        entity = await get_entity_by_id(db, engineer.id)
        if entity is not None and has_owner_permission(entity.permission, current_user.id):
            return True
    return False


async def get_ep_summary(db: AsyncSession, ship: Ship) -> dict:
    """Snapshot of the ship's EP state for display."""
    tokens = await get_ep_token_states(db, ship)
    ship_holder = ship_holder_id(ship.id)
    crew = await get_crew_for_ship(db, ship.id)
    held = ep_allocation.counts_by_holder(tokens)
    return {
        "ship_id": ship.id,
        "max_allowed": get_max_allowed_ep_tokens(ship),
        "total_tokens": len(tokens),
        "active_tokens": len(ep_allocation.active_tokens(tokens)),
        "ship_pool": ep_allocation.ship_token_count(tokens, ship_holder),
        "crew_has_tokens": ep_allocation.crew_holds_any(tokens, ship_holder),
        "crew": [
            {
                "crew_id": member.id,
                "name": member.name,
                "position": member.position,
                "ep_count": held.get(crew_holder_id(member.id), 0),
            }
            for member in crew
        ],
    }


# ---------------------------------------------------------------------------
# Crew departure
# ---------------------------------------------------------------------------

async def remove_crew_member(db: AsyncSession, ship: Ship, member: CrewMember) -> None:
    """Delete a crew member after handing their EP tokens back to the ship.

    Raises ValueError if the member does not serve on the ship.
    """
    if member.ship_id != ship.id:
        raise ValueError(f"Crew member {member.id} does not serve on ship {ship.id}")
    await return_crew_tokens_to_ship(db, ship, member.id)
    await db.delete(member)
    await db.flush()
    logger.info("Crew member %s left ship %s", member.id, ship.id)
