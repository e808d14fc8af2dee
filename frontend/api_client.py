# frontend/api_client.py
"""
HTTP collaborators for the dashboard, backed by the Ops API.

SitesClient     -> add_site / list_sites
AnalyticsStore  -> analytics / loading / error, refreshed with load()
"""
import logging

import requests

from frontend.config import API_BASE, REQUEST_TIMEOUT
from frontend.errors import AnalyticsUnavailable, PersistenceError
from frontend.site_form import SiteRecord, require_valid

logger = logging.getLogger(__name__)


def _url(base_url, endpoint):
    return f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"


class SitesClient:
    """Creates and lists sites through the backend."""

    def __init__(self, base_url=API_BASE, timeout=REQUEST_TIMEOUT):
        self.base_url = base_url
        self.timeout = timeout

    def add_site(self, record):
        """
        POST a site. Drafts and dicts are validated first, so invalid
        coordinates never leave the client.

        Raises PersistenceError if the request fails or is rejected.
        """
        if not isinstance(record, SiteRecord):
            record = require_valid(record)

        try:
            r = requests.post(
                _url(self.base_url, "sites"),
                json=record.model_dump(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise PersistenceError(f"Could not reach backend: {e}") from e

        if not r.ok:
            raise PersistenceError(f"Backend rejected site ({r.status_code}): {r.text}")
        return r.json()

    def list_sites(self):
        try:
            r = requests.get(_url(self.base_url, "sites"), timeout=self.timeout)
            r.raise_for_status()
            return r.json()
        except requests.RequestException as e:
            logger.error("Error fetching sites: %s", e)
            return []


class AnalyticsStore:
    """
    Holds the latest analytics snapshot plus its loading/error flags.
    The view only reads ``analytics``, ``loading`` and ``error``.
    """

    def __init__(self, base_url=API_BASE, timeout=REQUEST_TIMEOUT):
        self.base_url = base_url
        self.timeout = timeout
        self.analytics = None
        self.loading = False
        self.error = None
        self.range_days = None

    def load(self, range_days=7):
        self.range_days = range_days
        self.loading = True
        self.error = None
        try:
            r = requests.get(
                _url(self.base_url, "analytics"),
                params={"range_days": range_days},
                timeout=self.timeout,
            )
            r.raise_for_status()
            self.analytics = r.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("Error fetching analytics: %s", e)
            self.analytics = None
            self.error = AnalyticsUnavailable(str(e))
        finally:
            self.loading = False
        return self.analytics
