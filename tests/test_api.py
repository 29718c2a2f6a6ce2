"""
Integration tests for the HTTP query API, served from a static provider.
"""

import pytest
from fastapi.testclient import TestClient

from winquery.config import DEFAULT_CONFIG, merge_config
from winquery.errors import ProviderError
from winquery.main import create_app

PREFIX = DEFAULT_CONFIG["api"]["api_prefix"]


class FailingProvider:
    def enumerate(self):
        raise ProviderError("EnumWindows failed", code=1400)


@pytest.fixture
def client(provider):
    app = create_app(config=merge_config({}), provider=provider)
    with TestClient(app) as test_client:
        yield test_client


def window_indices(response) -> list[int]:
    return [w["index"] for w in response.json()]


class TestRootEndpoints:

    def test_health_reports_snapshot(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["snapshot_size"] == 5

    def test_root(self, client):
        assert client.get("/").json()["api_prefix"] == PREFIX


class TestQueryWindows:

    def test_lists_all_by_default(self, client):
        response = client.get(f"{PREFIX}/windows")
        assert response.status_code == 200
        assert window_indices(response) == [1, 2, 3, 4, 5]
        assert response.json()[1]["position"] == {"x": 0, "y": 0, "width": 1280, "height": 720}

    def test_filter_sort_select(self, client):
        response = client.get(
            f"{PREFIX}/windows",
            params={"process_name": "chrome", "sort_position": "x-1", "select": "1"},
        )
        assert window_indices(response) == [4]

    def test_sort_by_pid(self, client):
        response = client.get(f"{PREFIX}/windows", params={"sort_pid": "-1"})
        assert window_indices(response) == [3, 1, 2, 4, 5]

    def test_case_sensitive_override(self, client):
        params = {"title": "notepad"}
        assert window_indices(client.get(f"{PREFIX}/windows", params=params)) == [3]
        params["case_sensitive"] = "true"
        assert window_indices(client.get(f"{PREFIX}/windows", params=params)) == []

    @pytest.mark.parametrize("params, reason", [
        ({"select": "5-1"}, "invalid_range"),
        ({"select": "0"}, "non_positive_index"),
        ({"select": "9" * 5000}, "invalid_index"),
        ({"sort_position": "z1"}, "unknown_axis"),
        ({"sort_title": "2"}, "invalid_direction"),
    ])
    def test_parse_errors_are_422(self, client, params, reason):
        response = client.get(f"{PREFIX}/windows", params=params)
        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["error_type"] == "parse_error"
        assert detail["reason"] == reason

    @pytest.mark.parametrize("params", [
        {"select": ""},
        {"select": "  "},
        {"sort_position": ""},
        {"sort_pid": "", "sort_title": ""},
    ])
    def test_blank_parameters_are_ignored(self, client, params):
        response = client.get(f"{PREFIX}/windows", params=params)
        assert response.status_code == 200
        assert window_indices(response) == [1, 2, 3, 4, 5]


class TestLookupAndRefresh:

    def test_lookup_by_index(self, client):
        response = client.get(f"{PREFIX}/windows/3")
        assert response.status_code == 200
        assert response.json()["title"] == "notes.txt - Notepad"

    def test_lookup_out_of_range(self, client):
        response = client.get(f"{PREFIX}/windows/99")
        assert response.status_code == 404
        assert response.json()["detail"]["error_type"] == "window_not_found"

    def test_refresh(self, client):
        response = client.post(f"{PREFIX}/windows/refresh")
        assert response.status_code == 200
        assert response.json() == {"window_count": 5}

    def test_refresh_provider_error(self):
        app = create_app(config=merge_config({}), provider=FailingProvider())
        with TestClient(app) as failing_client:
            assert failing_client.get("/health").json()["snapshot_size"] == 0
            response = failing_client.post(f"{PREFIX}/windows/refresh")
        assert response.status_code == 502
        assert response.json()["detail"]["code"] == 1400
