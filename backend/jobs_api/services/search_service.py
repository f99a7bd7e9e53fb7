import json
import logging
from datetime import date

from jobs_api.schemas.position_opening import PositionOpeningResult
from jobs_api.schemas.search import SearchOptions
from jobs_api.services.index_schema import POSITION_OPENING_MAPPINGS, index_settings
from jobs_api.services.query import Query
from jobs_api.services.query_builder import build_search_request
from jobs_api.services.search_index import SearchIndex

logger = logging.getLogger("jobs_api")

USAJOBS_URL = "https://www.usajobs.gov/GetJob/ViewDetails/{external_id}"
GOVERNMENTJOBS_URL = "http://agency.governmentjobs.com/{agency}/default.cfm?action=viewjob&jobid={external_id}"


def url_for_position_opening(source: str | None, external_id: int | str | None) -> str | None:
    if not source:
        return None
    if source == "usajobs":
        return USAJOBS_URL.format(external_id=external_id)
    if source.startswith("ng:"):
        agency = source.split(":")[1]
        return GOVERNMENTJOBS_URL.format(agency=agency, external_id=external_id)
    return None


def _format_location(location: dict) -> str:
    return f"{location.get('city')}, {location.get('state')}"


def project_hit(hit: dict, highlight: bool = False) -> PositionOpeningResult:
    doc = hit["_source"]
    title = doc.get("position_title")
    fragments = (hit.get("highlight") or {}).get("position_title")
    if highlight and fragments:
        title = fragments[0]
    return PositionOpeningResult(
        id=hit.get("_id") or doc.get("id"),
        source=doc.get("source"),
        external_id=doc.get("external_id"),
        position_title=title,
        organization_name=doc.get("organization_name"),
        rate_interval_code=doc.get("rate_interval_code"),
        minimum=doc.get("minimum"),
        maximum=doc.get("maximum"),
        start_date=doc.get("start_date"),
        end_date=doc.get("end_date"),
        locations=[_format_location(loc) for loc in doc.get("locations") or []],
        url=url_for_position_opening(doc.get("source"), doc.get("external_id")),
    )


def search_for(index: SearchIndex, options: SearchOptions, today: date | None = None) -> list[PositionOpeningResult]:
    query = Query.parse(options.query, options.organization_id)
    request = build_search_request(options, query, today=today)
    response = index.search(request.to_body())

    hits = response["hits"]
    total = hits["total"]["value"] if isinstance(hits["total"], dict) else hits["total"]
    logged = options.model_dump(by_alias=True)
    logged["sort_by"] = request.sort_by
    logged["result_count"] = total
    logger.info("[Query] %s", json.dumps(logged))

    return [project_hit(hit, highlight=options.hl) for hit in hits["hits"]]


def create_search_index(index: SearchIndex, synonyms_path: str | None = None) -> None:
    index.create(index_settings(synonyms_path), POSITION_OPENING_MAPPINGS)


def delete_search_index(index: SearchIndex) -> None:
    index.delete()
