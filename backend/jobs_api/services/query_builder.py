"""
Builds the Elasticsearch request for a position opening search.

Clauses are accumulated as typed values and only turned into query DSL
by SearchRequest.to_body(), so the decision logic can be inspected
without a running index.
"""
import re
from datetime import date
from typing import Any, Union

from pydantic import BaseModel, ConfigDict

from jobs_api.schemas.search import SearchOptions
from jobs_api.services.index_schema import DEFAULT_SORT_FIELD, SORTABLE_FIELDS, TITLE_ANALYZER
from jobs_api.services.query import OrganizationFormat, Query

MAX_RETURNED_DOCUMENTS = 100
GEO_DISTANCE = "geo_distance"

_COORDINATE_RE = re.compile(r"^-?\d+(?:\.\d+)?$")


class _Clause(BaseModel):
    model_config = ConfigDict(frozen=True)


class TermMatch(_Clause):
    field: str
    value: Any

    def to_dsl(self) -> dict:
        return {"term": {self.field: self.value}}


class TermsMatch(_Clause):
    field: str
    values: tuple[str, ...]

    def to_dsl(self) -> dict:
        return {"terms": {self.field: list(self.values)}}


class PrefixMatch(_Clause):
    field: str
    value: str

    def to_dsl(self) -> dict:
        return {"prefix": {self.field: self.value}}


class BooleanMatch(_Clause):
    """Full-text match; operator "and" requires every analyzed token."""

    field: str
    query: Any
    operator: str | None = None
    analyzer: str | None = None

    def to_dsl(self) -> dict:
        if self.operator is None and self.analyzer is None:
            return {"match": {self.field: self.query}}
        body: dict = {"query": self.query}
        if self.operator:
            body["operator"] = self.operator
        if self.analyzer:
            body["analyzer"] = self.analyzer
        return {"match": {self.field: body}}


class RangeFilter(_Clause):
    field: str
    lte: str | None = None
    gte: str | None = None

    def to_dsl(self) -> dict:
        bounds = {}
        if self.gte is not None:
            bounds["gte"] = self.gte
        if self.lte is not None:
            bounds["lte"] = self.lte
        return {"range": {self.field: bounds}}


class NestedBoolean(_Clause):
    must: tuple["Clause", ...] = ()

    def to_dsl(self) -> dict:
        return {"bool": {"must": [c.to_dsl() for c in self.must]}}


Clause = Union[TermMatch, TermsMatch, PrefixMatch, BooleanMatch, NestedBoolean]
NestedBoolean.model_rebuild()


class BooleanQuery(_Clause):
    must: tuple[Clause, ...] = ()
    should: tuple[Clause, ...] = ()
    minimum_should_match: int = 1

    def to_dsl(self, filters: tuple[RangeFilter, ...] = ()) -> dict:
        body: dict = {}
        if self.must:
            body["must"] = [c.to_dsl() for c in self.must]
        if self.should:
            body["should"] = [c.to_dsl() for c in self.should]
            # With no should clauses the threshold would reject every document.
            body["minimum_should_match"] = self.minimum_should_match
        if filters:
            body["filter"] = [f.to_dsl() for f in filters]
        return {"bool": body}


class GeoDistanceSort(_Clause):
    field: str
    lat: float
    lon: float
    order: str = "asc"

    def to_dsl(self) -> dict:
        return {"_geo_distance": {self.field: {"lat": self.lat, "lon": self.lon}, "order": self.order}}


class FieldSort(_Clause):
    field: str
    order: str = "desc"

    def to_dsl(self) -> dict:
        return {self.field: {"order": self.order}}


class SearchRequest(_Clause):
    query: BooleanQuery | None = None
    filters: tuple[RangeFilter, ...] = ()
    sort: Union[GeoDistanceSort, FieldSort, None] = None
    size: int
    from_: int = 0
    highlight_fields: tuple[str, ...] = ("position_title",)
    sort_by: str | None = None

    def to_body(self) -> dict:
        if self.query is not None:
            query = self.query.to_dsl(self.filters)
        else:
            query = {"bool": {"filter": [f.to_dsl() for f in self.filters]}}
        body: dict = {
            "query": query,
            "size": self.size,
            "from": self.from_,
            "highlight": {"fields": {f: {"number_of_fragments": 0} for f in self.highlight_fields}},
        }
        if self.sort is not None:
            body["sort"] = [self.sort.to_dsl()]
        return body


def parse_lat_lon(value: str | None) -> tuple[float, float] | None:
    """Parse "lat,lon"; anything malformed or out of range yields None."""
    if not value:
        return None
    parts = [p.strip() for p in value.split(",")]
    if len(parts) != 2 or not all(_COORDINATE_RE.match(p) for p in parts):
        return None
    lat, lon = float(parts[0]), float(parts[1])
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        return None
    return lat, lon


def sort_field(requested: str | None) -> str:
    """Fall back to the import timestamp for blank or unsortable fields."""
    value = (requested or "").strip()
    return value if value in SORTABLE_FIELDS else DEFAULT_SORT_FIELD


def _organization_clause(query: Query) -> Clause:
    if query.organization_format is OrganizationFormat.PREFIX:
        return PrefixMatch(field="organization_id", value=query.organization_id)
    return TermMatch(field="organization_id", value=query.organization_id)


def build_boolean_query(source: str | None, tags: set[str] | None, query: Query) -> BooleanQuery:
    must: list[Clause] = []
    should: list[Clause] = []

    if source:
        must.append(TermMatch(field="source", value=source))
    if tags:
        must.append(TermsMatch(field="tags", values=tuple(sorted(tags))))
    if query.position_offering_type_code is not None:
        must.append(BooleanMatch(field="position_offering_type_code", query=query.position_offering_type_code))
    if query.position_schedule_type_code is not None:
        must.append(BooleanMatch(field="position_schedule_type_code", query=query.position_schedule_type_code))
    if query.keywords:
        should.append(BooleanMatch(field="position_title", query=query.keywords, analyzer=TITLE_ANALYZER))
        if query.location is None:
            # Keywords may name a place, e.g. "baltimore".
            should.append(BooleanMatch(field="locations.city", query=query.keywords, operator="and"))
    if query.rate_interval_code:
        must.append(BooleanMatch(field="rate_interval_code", query=query.rate_interval_code))
    if query.organization_id:
        must.append(_organization_clause(query))
    if query.location is not None:
        location_must: list[Clause] = []
        if query.has_state:
            location_must.append(TermMatch(field="locations.state", value=query.location.state))
        if query.has_city:
            location_must.append(BooleanMatch(field="locations.city", query=query.location.city, operator="and"))
        must.append(NestedBoolean(must=tuple(location_must)))

    return BooleanQuery(must=tuple(must), should=tuple(should), minimum_should_match=1)


def build_search_request(options: SearchOptions, query: Query, today: date | None = None) -> SearchRequest:
    document_limit = min(options.size, MAX_RETURNED_DOCUMENTS)
    tags = options.tag_set
    source = options.source or None

    boolean_query = None
    if source or tags or query.valid:
        boolean_query = build_boolean_query(source, tags, query)

    start_date_filter = RangeFilter(field="start_date", lte=(today or date.today()).isoformat())

    sort = None
    sort_by = sort_field(options.sort_by)
    if not query.keywords:
        point = parse_lat_lon(options.lat_lon)
        if point is None:
            sort = FieldSort(field=sort_by, order="desc")
        else:
            sort_by = GEO_DISTANCE
            sort = GeoDistanceSort(field="locations.geo", lat=point[0], lon=point[1], order="asc")

    return SearchRequest(
        query=boolean_query,
        filters=(start_date_filter,),
        sort=sort,
        size=document_limit,
        from_=options.from_,
        sort_by=sort_by,
    )
