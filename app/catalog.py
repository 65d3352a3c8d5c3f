# app/catalog.py
from typing import Iterable, List, Optional

from app.schemas import SiteRecord, normalize_status

STATUS_FILTER_ALL = "all"


class SiteCatalog:
    """Loaded site records plus the view left after search/status filtering.

    The view is rebuilt on every change; the record set is small.
    """

    def __init__(self, sites: Optional[Iterable[SiteRecord]] = None):
        self._sites: List[SiteRecord] = list(sites or [])
        self._search_term = ""
        self._status_filter = STATUS_FILTER_ALL
        self._view: List[SiteRecord] = []
        self._recompute()

    @property
    def sites(self) -> List[SiteRecord]:
        return list(self._sites)

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def status_filter(self) -> str:
        return self._status_filter

    def load(self, sites: Iterable[SiteRecord]) -> None:
        self._sites = list(sites)
        self._recompute()

    def set_search_term(self, term: Optional[str]) -> None:
        self._search_term = term or ""
        self._recompute()

    def set_status_filter(self, status: Optional[str]) -> None:
        if not status or status == STATUS_FILTER_ALL:
            self._status_filter = STATUS_FILTER_ALL
        else:
            self._status_filter = normalize_status(status)
        self._recompute()

    def filtered_view(self) -> List[SiteRecord]:
        return list(self._view)

    def _matches(self, site: SiteRecord) -> bool:
        if self._search_term and self._search_term.lower() not in site.site_url.lower():
            return False
        if self._status_filter != STATUS_FILTER_ALL and site.status != self._status_filter:
            return False
        return True

    def _recompute(self) -> None:
        self._view = [site for site in self._sites if self._matches(site)]
