"""Energy Point router — EP token provisioning, activation and crew allocation."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from shipenergy.database import get_db
from shipenergy.dependencies import get_current_user, get_ship_or_404, require_admin
from shipenergy.models.ship import Ship
from shipenergy.models.user import User
from shipenergy.schemas.ship import (
    ActiveCountRequest,
    CrewAllocationResponse,
    CrewCountRequest,
    EPSummaryResponse,
    EPTokenResponse,
    TokenCreateRequest,
)
from shipenergy.services.crew_service import get_crew_member_on_ship
from shipenergy.services.ep_token_service import (
    can_change_ep_for_ship,
    create_blank_ep_tokens,
    get_ep_summary,
    get_ep_tokens,
    get_max_allowed_ep_tokens,
    set_active_ep_tokens,
    set_crew_ep_count,
    ship_ep_count,
)

router = APIRouter(prefix="/ships/{ship_id}/energy-points", tags=["energy-points"])


async def _require_ep_permission(db: AsyncSession, ship: Ship, user: User) -> None:
    if not await can_change_ep_for_ship(db, ship, user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins or the owner of the ship's engineer can change EP",
        )


@router.get("", response_model=EPSummaryResponse)
async def get_energy_points(
    ship: Ship = Depends(get_ship_or_404),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Return the ship's EP pool, per-crew holdings and whether the caller may edit them."""
    summary = await get_ep_summary(db, ship)
    summary["can_modify"] = await can_change_ep_for_ship(db, ship, current_user)
    return summary


@router.get("/tokens", response_model=list[EPTokenResponse])
async def list_tokens(
    ship: Ship = Depends(get_ship_or_404),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    tokens = await get_ep_tokens(db, ship)
    return [
        {
            "id": t.id,
            "name": t.name,
            "active": bool(t.system.get("active", False)),
            "holder": t.system.get("holder"),
        }
        for t in tokens
    ]


@router.post(
    "/tokens", response_model=list[EPTokenResponse], status_code=status.HTTP_201_CREATED
)
async def provision_tokens(
    body: TokenCreateRequest,
    ship: Ship = Depends(get_ship_or_404),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    created = await create_blank_ep_tokens(db, ship, body.count)
    await db.commit()
    return [
        {"id": t.id, "name": t.name, "active": t.system["active"], "holder": t.system["holder"]}
        for t in created
    ]


@router.put("/active", response_model=EPSummaryResponse)
async def set_active(
    body: ActiveCountRequest,
    ship: Ship = Depends(get_ship_or_404),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Set the number of active EP tokens.  All crew holdings return to the ship.

    Missing tokens are provisioned first, up to the ship's EP maximum.
    """
    await _require_ep_permission(db, ship, current_user)
    max_allowed = get_max_allowed_ep_tokens(ship)
    if body.active_count > max_allowed:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Ship allows at most {max_allowed} active EP, got {body.active_count}",
        )

    existing = len(await get_ep_tokens(db, ship))
    if body.active_count > existing:
        await create_blank_ep_tokens(db, ship, body.active_count - existing)
    await set_active_ep_tokens(db, ship, body.active_count)
    await db.commit()

    summary = await get_ep_summary(db, ship)
    summary["can_modify"] = True
    return summary


@router.put("/crew/{crew_id}", response_model=CrewAllocationResponse)
async def set_crew_allocation(
    crew_id: int,
    body: CrewCountRequest,
    ship: Ship = Depends(get_ship_or_404),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Give a crew member up to ``count`` EP from the ship pool."""
    await _require_ep_permission(db, ship, current_user)
    if await get_crew_member_on_ship(db, ship.id, crew_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Crew member not found on this ship"
        )
    try:
        granted = await set_crew_ep_count(db, ship, crew_id, body.count)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    await db.commit()
    return CrewAllocationResponse(
        crew_id=crew_id,
        requested=body.count,
        granted=granted,
        ship_pool=await ship_ep_count(db, ship),
    )
