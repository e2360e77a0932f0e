"""Embedded record store — CRUD for typed records attached to a ship.

Records are ShipItem rows.  Callers describe new records as
``{"name", "type", "system"}`` specs and changes as ``{"_id", "system"}``
patches whose system dict is merged into the stored one.

Database errors are not caught here; they reach the caller unchanged.
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shipenergy.models.ship import Ship
from shipenergy.models.ship_item import ShipItem


async def _require_ship(db: AsyncSession, ship_id: int) -> None:
    if await db.get(Ship, ship_id) is None:
        raise ValueError(f"Ship {ship_id} not found")


async def create_embedded_records(
    db: AsyncSession, ship_id: int, specs: list[dict[str, Any]]
) -> list[ShipItem]:
    """Persist one ShipItem per spec and return them with ids assigned."""
    await _require_ship(db, ship_id)
    items: list[ShipItem] = []
    for spec in specs:
        if not spec.get("name") or not spec.get("type"):
            raise ValueError("Embedded record specs need both 'name' and 'type'")
        item = ShipItem(
            ship_id=ship_id,
            name=spec["name"],
            item_type=spec["type"],
            system=dict(spec.get("system") or {}),
        )
        items.append(item)
    db.add_all(items)
    await db.flush()
    return items


async def update_embedded_records(
    db: AsyncSession, ship_id: int, patches: list[dict[str, Any]]
) -> None:
    """Apply partial system updates to existing records of the ship.

    All patches are checked before any record changes, so an unknown id
    leaves every record as it was.
    """
    if not patches:
        return
    ids = [patch["_id"] for patch in patches]
    result = await db.execute(
        select(ShipItem).where(ShipItem.ship_id == ship_id, ShipItem.id.in_(ids))
    )
    by_id = {item.id: item for item in result.scalars().all()}
    missing = [item_id for item_id in ids if item_id not in by_id]
    if missing:
        raise ValueError(f"Embedded records {missing} not found on ship {ship_id}")

    for patch in patches:
        item = by_id[patch["_id"]]
        # Reassign rather than mutate so the JSON column is marked dirty
        item.system = {**item.system, **patch.get("system", {})}
    await db.flush()


async def list_embedded_records_by_type(
    db: AsyncSession, ship_id: int, item_type: str
) -> list[ShipItem]:
    """Return every record of item_type on the ship, oldest id first."""
    result = await db.execute(
        select(ShipItem)
        .where(ShipItem.ship_id == ship_id, ShipItem.item_type == item_type)
        .order_by(ShipItem.id)
    )
    return list(result.scalars().all())
