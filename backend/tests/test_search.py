import logging
from datetime import date

import pytest

from conftest import make_hit, make_response
from jobs_api.schemas.search import SearchOptions
from jobs_api.services.search_index import SearchIndexError
from jobs_api.services.search_service import (
    create_search_index,
    delete_search_index,
    project_hit,
    search_for,
    url_for_position_opening,
)


class TestUrlForPositionOpening:
    def test_usajobs(self):
        url = url_for_position_opening("usajobs", 12345)
        assert url == "https://www.usajobs.gov/GetJob/ViewDetails/12345"

    def test_neogov_agency(self):
        url = url_for_position_opening("ng:springfield", 77)
        assert "springfield" in url
        assert url.endswith("jobid=77")

    def test_unknown_source(self):
        assert url_for_position_opening("other-unknown", 1) is None
        assert url_for_position_opening(None, 1) is None


class TestProjectHit:
    def test_fields(self):
        result = project_hit(make_hit("usajobs:42"))
        assert result.id == "usajobs:42"
        assert result.source == "usajobs"
        assert result.external_id == 42
        assert result.position_title == "Nurse"
        assert result.locations == ["Baltimore, MD"]
        assert result.url == "https://www.usajobs.gov/GetJob/ViewDetails/42"
        assert result.minimum == 50000.0
        assert result.start_date == "2024-01-01"

    def test_highlight_substitution(self):
        hit = make_hit("usajobs:1", highlight={"position_title": ["<em>Nurse</em>"]})
        assert project_hit(hit, highlight=True).position_title == "<em>Nurse</em>"
        assert project_hit(hit, highlight=False).position_title == "Nurse"

    def test_highlight_requested_but_missing(self):
        assert project_hit(make_hit("usajobs:1"), highlight=True).position_title == "Nurse"

    def test_suppressed_locations(self):
        assert project_hit(make_hit("ng:austin:5", locations=None)).locations == []


class TestSearchFor:
    def test_returns_projected_hits(self, fake_index):
        fake_index.canned_response = make_response([make_hit("usajobs:1"), make_hit("ng:austin:2")])
        results = search_for(fake_index, SearchOptions(query="nurse"), today=date(2024, 5, 1))
        assert [r.id for r in results] == ["usajobs:1", "ng:austin:2"]
        assert results[1].url.startswith("http://agency.governmentjobs.com/austin/")

    def test_sends_built_request(self, fake_index):
        fake_index.canned_response = make_response([])
        search_for(fake_index, SearchOptions(size=500, **{"from": 20}), today=date(2024, 5, 1))
        body = fake_index.requests[0]
        assert body["size"] == 100
        assert body["from"] == 20
        assert body["query"] == {"bool": {"filter": [{"range": {"start_date": {"lte": "2024-05-01"}}}]}}

    def test_logs_options_and_count(self, fake_index, caplog):
        caplog.set_level(logging.INFO, logger="jobs_api")
        fake_index.canned_response = make_response([make_hit("usajobs:1")], total=7)
        search_for(fake_index, SearchOptions(lat_lon="38.9,-77.0"))
        messages = [r.getMessage() for r in caplog.records if r.getMessage().startswith("[Query]")]
        assert len(messages) == 1
        assert '"result_count": 7' in messages[0]
        assert '"sort_by": "geo_distance"' in messages[0]

    def test_index_error_propagates(self, fake_index):
        fake_index.error = SearchIndexError("boom")
        with pytest.raises(SearchIndexError, match="boom"):
            search_for(fake_index, SearchOptions())


class TestIndexLifecycle:
    def test_create_uses_schema(self, fake_index):
        create_search_index(fake_index, synonyms_path="synonyms.txt")
        settings, mappings = fake_index.created
        assert settings["analysis"]["filter"]["synonym"]["synonyms_path"] == "synonyms.txt"
        assert mappings["properties"]["locations"]["properties"]["geo"] == {"type": "geo_point"}
        assert mappings["properties"]["id"] == {"type": "keyword"}

    def test_delete(self, fake_index):
        delete_search_index(fake_index)
        assert fake_index.deleted


class TestSearchRouter:
    def test_search_endpoint(self, client, fake_index):
        fake_index.canned_response = make_response([make_hit("usajobs:9", highlight={"position_title": ["<em>Nurse</em>"]})])
        r = client.get("/api/v1/search?query=nurse&hl=1&size=5&from=10")
        assert r.status_code == 200
        data = r.json()
        assert data[0]["id"] == "usajobs:9"
        assert data[0]["position_title"] == "<em>Nurse</em>"
        assert fake_index.requests[0]["size"] == 5
        assert fake_index.requests[0]["from"] == 10

    def test_search_without_params_browses(self, client, fake_index):
        fake_index.canned_response = make_response([])
        r = client.get("/api/v1/search")
        assert r.status_code == 200
        assert r.json() == []
        assert "bool" in fake_index.requests[0]["query"]

    def test_negative_size_rejected(self, client):
        r = client.get("/api/v1/search?size=-1")
        assert r.status_code == 422

    def test_index_failure_is_bad_gateway(self, client, fake_index):
        fake_index.error = SearchIndexError("index unavailable")
        r = client.get("/api/v1/search?query=nurse")
        assert r.status_code == 502
        assert r.json()["detail"] == "index unavailable"

    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"
