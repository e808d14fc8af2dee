from unittest.mock import MagicMock, patch

import pytest
import requests

from frontend.analytics_view import ErrorView, ReadyView, build_analytics_view
from frontend.api_client import AnalyticsStore, SitesClient
from frontend.errors import AnalyticsUnavailable, PersistenceError, SiteValidationError
from frontend.site_form import SiteRecord

RECORD = SiteRecord(name="Harbor", latitude=10.0, longitude=20.0)


def response(ok=True, status_code=200, payload=None, text=""):
    r = MagicMock()
    r.ok = ok
    r.status_code = status_code
    r.text = text
    r.json.return_value = payload
    if not ok:
        r.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return r


# ---------------------------------------------------------------
# SitesClient
# ---------------------------------------------------------------

def test_add_site_posts_json():
    client = SitesClient("http://api/", timeout=3)
    with patch("frontend.api_client.requests.post",
               return_value=response(status_code=201, payload={"id": 1})) as post:
        assert client.add_site(RECORD) == {"id": 1}

    post.assert_called_once_with(
        "http://api/sites",
        json={"name": "Harbor", "description": "", "latitude": 10.0,
              "longitude": 20.0, "altitude": None, "is_active": True},
        timeout=3,
    )


def test_add_site_rejected_by_backend():
    client = SitesClient("http://api")
    with patch("frontend.api_client.requests.post",
               return_value=response(ok=False, status_code=500, text="db locked")):
        with pytest.raises(PersistenceError, match="500"):
            client.add_site(RECORD)


def test_add_site_transport_failure():
    client = SitesClient("http://api")
    with patch("frontend.api_client.requests.post",
               side_effect=requests.ConnectionError("refused")):
        with pytest.raises(PersistenceError):
            client.add_site(RECORD)


def test_add_site_validates_plain_dicts_first():
    client = SitesClient("http://api")
    with patch("frontend.api_client.requests.post") as post:
        with pytest.raises(SiteValidationError):
            client.add_site({"name": "Harbor", "latitude": 123, "longitude": 0})
    post.assert_not_called()


def test_list_sites_swallows_errors():
    client = SitesClient("http://api")
    with patch("frontend.api_client.requests.get",
               side_effect=requests.Timeout("slow")):
        assert client.list_sites() == []


# ---------------------------------------------------------------
# AnalyticsStore
# ---------------------------------------------------------------

def test_load_stores_snapshot_and_passes_range():
    store = AnalyticsStore("http://api", timeout=2)
    snapshot = {"key_metrics": {"total_missions": 3}}
    with patch("frontend.api_client.requests.get", return_value=response(payload=snapshot)) as get:
        store.load(30)

    get.assert_called_once_with("http://api/analytics", params={"range_days": 30}, timeout=2)
    assert store.analytics == snapshot
    assert store.range_days == 30
    assert store.loading is False
    assert store.error is None
    assert isinstance(build_analytics_view(store), ReadyView)


def test_loading_flag_set_during_request():
    store = AnalyticsStore("http://api")
    seen = []

    def fake_get(*args, **kwargs):
        seen.append(store.loading)
        return response(payload={})

    with patch("frontend.api_client.requests.get", side_effect=fake_get):
        store.load()

    assert seen == [True]
    assert store.loading is False


def test_load_failure_sets_error():
    store = AnalyticsStore("http://api")
    store.analytics = {"stale": True}
    with patch("frontend.api_client.requests.get",
               return_value=response(ok=False, status_code=503)):
        store.load(7)

    assert store.analytics is None
    assert isinstance(store.error, AnalyticsUnavailable)
    assert store.loading is False
    assert isinstance(build_analytics_view(store), ErrorView)
