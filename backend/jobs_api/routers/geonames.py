from fastapi import APIRouter, Depends

from jobs_api.dependencies import get_geocoder
from jobs_api.schemas.geoname import GeonameCreate
from jobs_api.schemas.position_opening import ImportResponse
from jobs_api.services.geocode_service import GeonameLookup

router = APIRouter(prefix="/geonames", tags=["geonames"])


@router.post("", response_model=ImportResponse, status_code=201)
def import_geonames(records: list[GeonameCreate], geocoder: GeonameLookup = Depends(get_geocoder)):
    return ImportResponse(imported=geocoder.import_geonames(records))
