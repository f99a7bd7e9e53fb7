from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from jobs_api.config import settings
from jobs_api.database import get_db
from jobs_api.services.geocode_service import GeonameLookup
from jobs_api.services.search_index import ElasticsearchIndex, SearchIndex


@lru_cache(maxsize=1)
def get_search_index() -> SearchIndex:
    return ElasticsearchIndex.from_url(settings.elasticsearch_url, settings.index_name)


def get_geocoder(db: Session = Depends(get_db)) -> GeonameLookup:
    return GeonameLookup(db)
