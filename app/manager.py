# app/manager.py
# Operator-facing workflow around a store: list, mutate, import, export.
# Failures become notifications instead of exceptions.
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, Optional

from app.catalog import SiteCatalog
from app.errors import ParseError, StoreError, ValidationError
from app.importer import export_csv, import_csv
from app.schemas import SiteData, SiteRecord
from app.stores.base import ProgressCallback, SiteStore
from app.utils.dates import expiry_alert

logger = logging.getLogger(__name__)

Notifier = Callable[[str, str], None]


def log_notification(level: str, message: str) -> None:
    logger.log(logging.ERROR if level == "error" else logging.INFO, message)


@dataclass
class ImportReport:
    imported: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class SiteManager:
    def __init__(self, store: SiteStore, notify: Optional[Notifier] = None,
                 today: Callable[[], date] = date.today):
        self.store = store
        self.catalog = SiteCatalog()
        self.notify = notify or log_notification
        self.today = today
        self.loaded = False
        self.import_in_progress = False

    def refresh(self) -> bool:
        """Reload from the store. A failed fetch keeps the current view."""
        try:
            sites = self.store.list_sites()
        except StoreError as exc:
            logger.error("Failed to load sites: %s", exc)
            self.notify("error", "Failed to load sites. Please try again.")
            return False
        self.catalog.load(sites)
        self.loaded = True
        return True

    def set_search_term(self, term: str) -> None:
        self.catalog.set_search_term(term)

    def set_status_filter(self, status: str) -> None:
        self.catalog.set_status_filter(status)

    def visible_sites(self) -> List[SiteRecord]:
        return self.catalog.filtered_view()

    def alert_for(self, site) -> Optional[str]:
        return expiry_alert(site, self.today())

    def add_site(self, site: SiteData) -> Optional[int]:
        try:
            site_id = self.store.create_site(site)
        except StoreError as exc:
            logger.error("Failed to add site %s: %s", site.site_url, exc)
            self.notify("error", "Failed to add site")
            return None
        self.notify("success", "Site added successfully")
        self.refresh()
        return site_id

    def update_site(self, site_id: int, site: SiteData) -> bool:
        try:
            self.store.update_site(site_id, site)
        except StoreError as exc:
            logger.error("Failed to update site %s: %s", site_id, exc)
            self.notify("error", "Failed to update site")
            return False
        self.notify("success", "Site updated successfully")
        self.refresh()
        return True

    def delete_site(self, site_id: int) -> bool:
        try:
            self.store.delete_site(site_id)
        except StoreError as exc:
            logger.error("Failed to delete site %s: %s", site_id, exc)
            self.notify("error", "Failed to delete site")
            return False
        self.notify("success", "Site deleted successfully")
        self.refresh()
        return True

    def import_csv(self, data, progress: Optional[ProgressCallback] = None) -> ImportReport:
        if self.import_in_progress:
            return ImportReport(errors=["An import is already running"])

        self.import_in_progress = True
        # reload after any store write; a failed batch may have committed earlier chunks
        wrote = False
        try:
            imported = import_csv(data, self.store, progress=progress)
        except ParseError as exc:
            report = ImportReport(errors=[str(exc)])
        except ValidationError as exc:
            report = ImportReport(errors=exc.errors)
        except StoreError as exc:
            logger.error("Import aborted: %s", exc)
            report = ImportReport(errors=[f"Import failed: {exc}"])
            wrote = True
        else:
            report = ImportReport(imported=imported)
            wrote = True
        finally:
            self.import_in_progress = False

        if report.ok:
            self.notify("success", f"{report.imported} sites imported successfully")
        else:
            self.notify("error", "Import failed")
        if wrote:
            self.refresh()
        return report

    def export_csv(self) -> bytes:
        return export_csv(self.catalog.filtered_view())
