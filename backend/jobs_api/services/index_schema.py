"""
Elasticsearch analysis settings and mappings for position openings.
"""
from jobs_api.config import settings

TITLE_ANALYZER = "custom_analyzer"


def index_settings(synonyms_path: str | None = None) -> dict:
    return {
        "analysis": {
            "analyzer": {
                TITLE_ANALYZER: {
                    "type": "custom",
                    "tokenizer": "whitespace",
                    "filter": ["lowercase", "synonym", "snowball"],
                },
            },
            "filter": {
                "synonym": {
                    "type": "synonym",
                    "synonyms_path": synonyms_path or settings.synonyms_path,
                },
            },
        },
    }


POSITION_OPENING_MAPPINGS = {
    "properties": {
        "type": {"type": "keyword"},
        "source": {"type": "keyword"},
        "tags": {"type": "keyword"},
        "external_id": {"type": "integer"},
        "position_title": {
            "type": "text",
            "analyzer": TITLE_ANALYZER,
            "term_vector": "with_positions_offsets",
            "store": True,
        },
        "organization_id": {"type": "keyword"},
        "organization_name": {"type": "keyword"},
        "locations": {
            "properties": {
                "city": {"type": "text", "analyzer": "simple"},
                "state": {"type": "keyword"},
                "geo": {"type": "geo_point"},
            },
        },
        "start_date": {"type": "date", "format": "yyyy-MM-dd"},
        "end_date": {"type": "date", "format": "yyyy-MM-dd"},
        "minimum": {"type": "float"},
        "maximum": {"type": "float"},
        "position_offering_type_code": {"type": "integer"},
        "position_schedule_type_code": {"type": "integer"},
        "rate_interval_code": {"type": "keyword"},
        "id": {"type": "keyword"},
        "timestamp": {"type": "date"},
    },
}

DEFAULT_SORT_FIELD = "timestamp"
# Analyzed text and geo points cannot back a plain field sort.
SORTABLE_FIELDS = frozenset(
    name
    for name, mapping in POSITION_OPENING_MAPPINGS["properties"].items()
    if mapping.get("type") in ("keyword", "integer", "float", "date")
)
