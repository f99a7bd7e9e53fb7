"""
Prepares raw position openings for the index: derives the document id,
geocodes a manageable number of locations and bulk-writes the batch.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Iterable

from pydantic import BaseModel

from jobs_api.schemas.position_opening import PositionOpeningCreate
from jobs_api.services.geocode_service import Geocoder
from jobs_api.services.search_index import SearchIndex

logger = logging.getLogger("jobs_api")

# Openings listed in this many places are too broad to place on a map.
CATCHALL_THRESHOLD = 20

_QUALIFIER_RE = re.compile(r", .*$")


def document_id(source: str, external_id: int | str) -> str:
    return f"{source}:{external_id}"


def normalize_city(city: str) -> str:
    """Drop a " Metro Area" marker and anything after the first ", "."""
    return _QUALIFIER_RE.sub("", city.replace(" Metro Area", "", 1))


def enrich_locations(locations: list[dict] | None, geocoder: Geocoder) -> list[dict] | None:
    if not locations:
        return locations
    if len(locations) >= CATCHALL_THRESHOLD:
        return None
    for loc in locations:
        lat_lon = geocoder.geocode(normalize_city(loc["city"]), loc["state"])
        if lat_lon:
            loc["geo"] = lat_lon
    return locations


def prepare_document(record: PositionOpeningCreate | dict, geocoder: Geocoder, timestamp: str) -> dict:
    if isinstance(record, BaseModel):
        doc = record.model_dump()
    else:
        doc = dict(record)
        if doc.get("locations"):
            doc["locations"] = [dict(loc) for loc in doc["locations"]]
    doc["id"] = document_id(doc["source"], doc["external_id"])
    doc["timestamp"] = timestamp
    if "locations" in doc:
        doc["locations"] = enrich_locations(doc["locations"], geocoder)
    return doc


def import_position_openings(
    index: SearchIndex,
    geocoder: Geocoder,
    records: Iterable[PositionOpeningCreate | dict],
) -> int:
    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    documents = [prepare_document(r, geocoder, now) for r in records]
    index.bulk_index(documents)
    # Searches issued right after an import must see the new documents.
    index.refresh()
    logger.info("Imported %d position openings", len(documents))
    return len(documents)
