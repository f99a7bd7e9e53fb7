from jobs_api.services.query_builder import MAX_RETURNED_DOCUMENTS
from jobs_api.services.search_index import SearchIndex


def _page_body(source: str, offset: int, page_size: int) -> dict:
    return {
        "query": {"term": {"source": source}},
        "_source": ["external_id"],
        "sort": [{"id": {"order": "asc"}}],
        "from": offset,
        "size": page_size,
    }


def _total(response: dict) -> int:
    total = response["hits"]["total"]
    return total["value"] if isinstance(total, dict) else int(total)


def get_external_ids_by_source(
    index: SearchIndex, source: str, page_size: int = MAX_RETURNED_DOCUMENTS
) -> list[int]:
    """Collect every external_id indexed for a source, page by page.

    The total from the first page is the target. Writers racing with the
    scan can make the result incomplete; an empty page ends the scan so a
    shrinking index cannot loop forever.
    """
    external_ids: list[int] = []
    seen: set[int] = set()
    offset = 0
    total = None
    while total is None or offset < total:
        response = index.search(_page_body(source, offset, page_size))
        if total is None:
            total = _total(response)
        hits = response["hits"]["hits"]
        if not hits:
            break
        for hit in hits:
            external_id = hit["_source"]["external_id"]
            if external_id not in seen:
                seen.add(external_id)
                external_ids.append(external_id)
        offset += len(hits)
    return external_ids
