# app/stores/supabase.py
# Supabase backend over the PostgREST API (service role key).
# Table columns match SiteData field names plus id, created_at, updated_at;
# created_at/updated_at default to now() in the table definition; updates send
# the "now" timestamp literal, which Postgres resolves to the server clock.
import logging
from typing import List, Optional

import requests

from app.errors import SiteNotFoundError, StoreError
from app.schemas import SiteData, SiteRecord
from app.stores.base import SiteStore

logger = logging.getLogger(__name__)

SERVER_NOW = "now"


class SupabaseSiteStore(SiteStore):
    name = "supabase"

    def __init__(self, url: str, service_key: str, table: str = "sites", timeout: float = 8,
                 session: Optional[requests.Session] = None):
        if not url or not service_key:
            raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set for the supabase store")
        self.endpoint = f"{url.rstrip('/')}/rest/v1/{table}"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "apikey": service_key,
            "Authorization": f"Bearer {service_key}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, expected, params=None, json=None, prefer=None):
        headers = dict(self.headers)
        if prefer:
            headers["Prefer"] = prefer
        try:
            r = self.session.request(method, self.endpoint, headers=headers, params=params,
                                     json=json, timeout=self.timeout)
        except requests.RequestException as exc:
            raise StoreError(f"Supabase request failed: {exc}") from exc
        if r.status_code not in expected:
            logger.error("Supabase %s returned %s: %s", method, r.status_code, r.text)
            raise StoreError(f"Supabase {method} failed ({r.status_code}): {r.text}")
        return r

    def list_sites(self) -> List[SiteRecord]:
        params = {"select": "*", "order": "created_at.desc,id.desc"}
        r = self._request("GET", (200,), params=params)
        return [SiteRecord.model_validate(row) for row in r.json()]

    def create_site(self, site: SiteData) -> int:
        r = self._request("POST", (200, 201), json=site.model_dump(mode="json"),
                          prefer="return=representation")
        rows = r.json()
        return rows[0]["id"]

    def update_site(self, site_id: int, site: SiteData) -> None:
        payload = site.model_dump(mode="json")
        payload["updated_at"] = SERVER_NOW
        r = self._request("PATCH", (200,), params={"id": f"eq.{site_id}"}, json=payload,
                          prefer="return=representation")
        if not r.json():
            raise SiteNotFoundError(site_id)

    def delete_site(self, site_id: int) -> None:
        r = self._request("DELETE", (200,), params={"id": f"eq.{site_id}"},
                          prefer="return=representation")
        if not r.json():
            raise SiteNotFoundError(site_id)

    def _commit_chunk(self, sites: List[SiteData]) -> None:
        # PostgREST runs a bulk insert in a single transaction
        self._request("POST", (200, 201), json=[site.model_dump(mode="json") for site in sites],
                      prefer="return=minimal")
