"""Ships router — ship sheets and their crew rosters."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from shipenergy.database import get_db
from shipenergy.dependencies import get_current_user, get_ship_or_404, require_admin
from shipenergy.models.ship import Ship
from shipenergy.models.user import User
from shipenergy.schemas.ship import (
    CrewCreate,
    CrewResponse,
    CrewUpdate,
    ShipCreate,
    ShipResponse,
)
from shipenergy.services.crew_service import (
    add_crew_member,
    get_crew_for_ship,
    get_crew_member_on_ship,
    set_crew_position,
)
from shipenergy.services.ep_token_service import remove_crew_member
from shipenergy.services.ship_service import create_ship, list_ships

router = APIRouter(prefix="/ships", tags=["ships"])


@router.post("", response_model=ShipResponse, status_code=status.HTTP_201_CREATED)
async def create_ship_endpoint(
    body: ShipCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    ship = await create_ship(
        db, name=body.name, max_energy_points=body.max_energy_points, created_by=current_user
    )
    await db.commit()
    return ship


@router.get("", response_model=list[ShipResponse])
async def list_ships_endpoint(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await list_ships(db)


@router.get("/{ship_id}", response_model=ShipResponse)
async def get_ship_endpoint(
    ship: Ship = Depends(get_ship_or_404),
    current_user: User = Depends(get_current_user),
):
    return ship


@router.get("/{ship_id}/crew", response_model=list[CrewResponse])
async def list_crew(
    ship: Ship = Depends(get_ship_or_404),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await get_crew_for_ship(db, ship.id)


@router.post(
    "/{ship_id}/crew", response_model=CrewResponse, status_code=status.HTTP_201_CREATED
)
async def add_crew(
    body: CrewCreate,
    ship: Ship = Depends(get_ship_or_404),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    member = await add_crew_member(
        db, ship.id, name=body.name, position=body.position, owner_user_id=body.owner_user_id
    )
    await db.commit()
    return member


@router.patch("/{ship_id}/crew/{crew_id}", response_model=CrewResponse)
async def update_crew(
    crew_id: int,
    body: CrewUpdate,
    ship: Ship = Depends(get_ship_or_404),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    member = await get_crew_member_on_ship(db, ship.id, crew_id)
    if member is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Crew member not found on this ship"
        )
    member = await set_crew_position(db, member, body.position)
    await db.commit()
    return member


@router.delete("/{ship_id}/crew/{crew_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_crew(
    crew_id: int,
    ship: Ship = Depends(get_ship_or_404),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    member = await get_crew_member_on_ship(db, ship.id, crew_id)
    if member is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Crew member not found on this ship"
        )
    await remove_crew_member(db, ship, member)
    await db.commit()
    return None
