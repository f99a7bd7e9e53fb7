from fastapi import APIRouter, Depends, HTTPException, Query

from jobs_api.config import settings
from jobs_api.dependencies import get_geocoder, get_search_index
from jobs_api.schemas.position_opening import ExternalIdsResponse, ImportResponse, PositionOpeningCreate
from jobs_api.services.geocode_service import GeonameLookup
from jobs_api.services.id_pager import get_external_ids_by_source
from jobs_api.services.ingestion_service import import_position_openings
from jobs_api.services.search_index import SearchIndex, SearchIndexError
from jobs_api.services.search_service import create_search_index, delete_search_index

router = APIRouter(prefix="/position_openings", tags=["position_openings"])


@router.post("", response_model=ImportResponse, status_code=201)
def import_openings(
    records: list[PositionOpeningCreate],
    index: SearchIndex = Depends(get_search_index),
    geocoder: GeonameLookup = Depends(get_geocoder),
):
    try:
        count = import_position_openings(index, geocoder, records)
    except SearchIndexError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return ImportResponse(imported=count)


@router.get("/external_ids", response_model=ExternalIdsResponse)
def external_ids(
    source: str = Query(..., min_length=1),
    index: SearchIndex = Depends(get_search_index),
):
    try:
        ids = get_external_ids_by_source(index, source)
    except SearchIndexError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return ExternalIdsResponse(source=source, external_ids=ids)


@router.post("/index", status_code=201)
def create_index(index: SearchIndex = Depends(get_search_index)):
    try:
        create_search_index(index, settings.synonyms_path)
    except SearchIndexError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return {"message": f"Index {index.index_name} created"}


@router.delete("/index")
def delete_index(index: SearchIndex = Depends(get_search_index)):
    try:
        delete_search_index(index)
    except SearchIndexError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return {"message": f"Index {index.index_name} deleted"}
