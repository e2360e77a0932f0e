"""Pydantic schemas for ship, crew and Energy Point endpoints."""

from pydantic import BaseModel, Field

from shipenergy.models.crew_member import CrewPosition


class ShipCreate(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    max_energy_points: int | None = Field(default=None, ge=0)


class ShipResponse(BaseModel):
    id: int
    name: str
    max_energy_points: int | None

    model_config = {"from_attributes": True}


class CrewCreate(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    position: CrewPosition = CrewPosition.unassigned
    owner_user_id: int | None = None


class CrewUpdate(BaseModel):
    position: CrewPosition


class CrewResponse(BaseModel):
    id: int
    ship_id: int
    name: str
    position: CrewPosition

    model_config = {"from_attributes": True}


class TokenCreateRequest(BaseModel):
    count: int = Field(ge=0)


class ActiveCountRequest(BaseModel):
    active_count: int = Field(ge=0)


class CrewCountRequest(BaseModel):
    count: int = Field(ge=0)


class EPTokenResponse(BaseModel):
    id: int
    name: str
    active: bool
    holder: str


class CrewEPCount(BaseModel):
    crew_id: int
    name: str
    position: CrewPosition
    ep_count: int


class EPSummaryResponse(BaseModel):
    ship_id: int
    max_allowed: int
    total_tokens: int
    active_tokens: int
    ship_pool: int
    crew_has_tokens: bool
    can_modify: bool
    crew: list[CrewEPCount]


class CrewAllocationResponse(BaseModel):
    crew_id: int
    requested: int
    granted: int
    ship_pool: int
