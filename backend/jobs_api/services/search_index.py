from typing import Iterable, Protocol

from elasticsearch import ApiError, Elasticsearch, TransportError
from elasticsearch.helpers import BulkIndexError, bulk


class SearchIndexError(RuntimeError):
    """The search index rejected or failed a request."""


class SearchIndex(Protocol):
    index_name: str

    def search(self, body: dict) -> dict: ...

    def bulk_index(self, documents: Iterable[dict]) -> int: ...

    def refresh(self) -> None: ...

    def create(self, settings: dict, mappings: dict) -> None: ...

    def delete(self) -> None: ...


# Request body keys that the client takes under a different keyword.
_BODY_KEYWORDS = {"from": "from_", "_source": "source"}


class ElasticsearchIndex:
    def __init__(self, client: Elasticsearch, index_name: str):
        self._client = client
        self.index_name = index_name

    @classmethod
    def from_url(cls, url: str, index_name: str) -> "ElasticsearchIndex":
        return cls(Elasticsearch(url), index_name)

    def search(self, body: dict) -> dict:
        params = {_BODY_KEYWORDS.get(k, k): v for k, v in body.items()}
        try:
            response = self._client.search(index=self.index_name, **params)
        except (ApiError, TransportError) as exc:
            raise SearchIndexError(f"Search against {self.index_name} failed: {exc}") from exc
        return response.body

    def bulk_index(self, documents: Iterable[dict]) -> int:
        actions = (
            {"_index": self.index_name, "_id": doc["id"], "_source": doc}
            for doc in documents
        )
        try:
            success, _ = bulk(self._client, actions)
        except BulkIndexError as exc:
            raise SearchIndexError(f"Bulk import into {self.index_name} failed: {len(exc.errors)} document(s) rejected") from exc
        except (ApiError, TransportError) as exc:
            raise SearchIndexError(f"Bulk import into {self.index_name} failed: {exc}") from exc
        return success

    def refresh(self) -> None:
        try:
            self._client.indices.refresh(index=self.index_name)
        except (ApiError, TransportError) as exc:
            raise SearchIndexError(f"Refresh of {self.index_name} failed: {exc}") from exc

    def create(self, settings: dict, mappings: dict) -> None:
        try:
            self._client.indices.create(index=self.index_name, settings=settings, mappings=mappings)
        except (ApiError, TransportError) as exc:
            raise SearchIndexError(f"Creating {self.index_name} failed: {exc}") from exc

    def delete(self) -> None:
        try:
            self._client.indices.delete(index=self.index_name, ignore_unavailable=True)
        except (ApiError, TransportError) as exc:
            raise SearchIndexError(f"Deleting {self.index_name} failed: {exc}") from exc
