from fastapi import APIRouter, Depends, HTTPException, Query

from jobs_api.dependencies import get_search_index
from jobs_api.schemas.position_opening import PositionOpeningResult
from jobs_api.schemas.search import SearchOptions
from jobs_api.services.search_index import SearchIndex, SearchIndexError
from jobs_api.services.search_service import search_for

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=list[PositionOpeningResult])
def search(
    query: str | None = None,
    organization_id: str | None = None,
    source: str | None = None,
    tags: str | None = None,
    lat_lon: str | None = None,
    size: int = Query(10, ge=0),
    from_: int = Query(0, ge=0, alias="from"),
    sort_by: str = "timestamp",
    hl: bool = False,
    index: SearchIndex = Depends(get_search_index),
):
    options = SearchOptions(
        query=query,
        organization_id=organization_id,
        source=source,
        tags=tags,
        lat_lon=lat_lon,
        size=size,
        from_=from_,
        sort_by=sort_by,
        hl=hl,
    )
    try:
        return search_for(index, options)
    except SearchIndexError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
