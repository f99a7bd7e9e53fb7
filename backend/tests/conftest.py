import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from jobs_api.database import get_db, init_db
from jobs_api.dependencies import get_search_index
from jobs_api.main import app


class FakeSearchIndex:
    """In-memory stand-in for the Elasticsearch index.

    Understands the term query on a single field used for paging and
    plain from/size slicing ordered by id; anything richer can be
    answered by setting ``canned_response``.
    """

    def __init__(self, index_name="test-jobs"):
        self.index_name = index_name
        self.documents: dict[str, dict] = {}
        self.requests: list[dict] = []
        self.refresh_count = 0
        self.created = None
        self.deleted = False
        self.canned_response = None
        self.error = None

    def search(self, body):
        self.requests.append(body)
        if self.error:
            raise self.error
        if self.canned_response is not None:
            return self.canned_response
        docs = sorted(self.documents.values(), key=lambda d: d["id"])
        term = body.get("query", {}).get("term")
        if term:
            field, value = next(iter(term.items()))
            docs = [d for d in docs if d.get(field) == value]
        start = body.get("from", 0)
        page = docs[start:start + body.get("size", 10)]
        return {
            "hits": {
                "total": {"value": len(docs), "relation": "eq"},
                "hits": [{"_id": d["id"], "_source": d} for d in page],
            }
        }

    def bulk_index(self, documents):
        if self.error:
            raise self.error
        count = 0
        for doc in documents:
            self.documents[doc["id"]] = doc
            count += 1
        return count

    def refresh(self):
        self.refresh_count += 1

    def create(self, settings, mappings):
        if self.error:
            raise self.error
        self.created = (settings, mappings)

    def delete(self):
        self.deleted = True


class FakeGeocoder:
    def __init__(self, places=None):
        self.places = places or {}
        self.calls: list[tuple[str, str]] = []

    def geocode(self, location, state):
        self.calls.append((location, state))
        return self.places.get((location, state))


def make_hit(doc_id, highlight=None, **fields):
    source, _, external_id = doc_id.rpartition(":")
    doc = {
        "id": doc_id,
        "source": source,
        "external_id": int(external_id),
        "position_title": "Nurse",
        "organization_name": "Veterans Affairs",
        "rate_interval_code": "PA",
        "minimum": 50000.0,
        "maximum": 70000.0,
        "start_date": "2024-01-01",
        "end_date": "2024-12-31",
        "locations": [{"city": "Baltimore", "state": "MD"}],
    }
    doc.update(fields)
    hit = {"_id": doc_id, "_source": doc}
    if highlight:
        hit["highlight"] = highlight
    return hit


def make_response(hits, total=None):
    return {"hits": {"total": {"value": len(hits) if total is None else total, "relation": "eq"}, "hits": hits}}


@pytest.fixture
def fake_index():
    return FakeSearchIndex()


@pytest.fixture
def fake_geocoder():
    return FakeGeocoder()


@pytest.fixture
def db_session(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'geonames.sqlite'}",
        connect_args={"check_same_thread": False},
    )
    init_db(bind=engine)
    TestSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = TestSession()
    yield TestSession, session
    session.close()


@pytest.fixture
def client(fake_index, db_session):
    TestSession, _ = db_session

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_search_index] = lambda: fake_index
    yield TestClient(app)
    app.dependency_overrides.clear()
