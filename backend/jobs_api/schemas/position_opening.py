from pydantic import BaseModel, Field


class LocationIn(BaseModel):
    city: str
    state: str


class PositionOpeningCreate(BaseModel):
    type: str = "position_opening"
    source: str = Field(..., min_length=1)
    external_id: int
    position_title: str
    organization_id: str | None = None
    organization_name: str | None = None
    locations: list[LocationIn] = []
    start_date: str | None = None  # YYYY-MM-DD
    end_date: str | None = None  # YYYY-MM-DD
    minimum: float | None = None
    maximum: float | None = None
    position_offering_type_code: int | None = None
    position_schedule_type_code: int | None = None
    rate_interval_code: str | None = None
    tags: list[str] = []


class PositionOpeningResult(BaseModel):
    id: str
    source: str
    external_id: int
    position_title: str
    organization_name: str | None
    rate_interval_code: str | None
    minimum: float | None
    maximum: float | None
    start_date: str | None
    end_date: str | None
    locations: list[str] = []
    url: str | None


class ImportResponse(BaseModel):
    imported: int


class ExternalIdsResponse(BaseModel):
    source: str
    external_ids: list[int]
