# app/stores/base.py
import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional

from app.schemas import SiteData, SiteRecord

logger = logging.getLogger(__name__)

# keeps each chunk under the hosted stores' per-request write ceiling
MAX_CHUNK_SIZE = 400

ProgressCallback = Callable[[float], None]


class SiteStore(ABC):
    """Narrow persistence interface for site license records.

    Backends raise ``StoreError`` (or ``SiteNotFoundError``) for any failure.
    """

    name = "abstract"

    @abstractmethod
    def list_sites(self) -> List[SiteRecord]:
        """All records, newest first."""

    @abstractmethod
    def create_site(self, site: SiteData) -> int:
        """Insert one record and return its id; the store sets both timestamps."""

    @abstractmethod
    def update_site(self, site_id: int, site: SiteData) -> None:
        """Replace the editable fields of a record and refresh updated_at."""

    @abstractmethod
    def delete_site(self, site_id: int) -> None:
        """Hard delete."""

    @abstractmethod
    def _commit_chunk(self, sites: List[SiteData]) -> None:
        """Write ``sites`` as one atomic multi-insert."""

    def create_batch(self, sites: Iterable[SiteData], chunk_size: int = MAX_CHUNK_SIZE,
                     progress: Optional[ProgressCallback] = None) -> int:
        """Insert ``sites`` in ordered chunks and return how many were written.

        Chunks are committed one after the other. A failing chunk raises and
        leaves the chunks before it committed; nothing is rolled back.
        """
        if not 0 < chunk_size <= MAX_CHUNK_SIZE:
            raise ValueError(f"chunk_size must be between 1 and {MAX_CHUNK_SIZE}")

        sites = list(sites)
        total = len(sites)
        queued = 0
        written = 0
        for start in range(0, total, chunk_size):
            chunk = sites[start:start + chunk_size]
            for _ in chunk:
                queued += 1
                if progress:
                    progress(queued / total)
            try:
                self._commit_chunk(chunk)
            except Exception:
                logger.error("Batch write failed after %d of %d records were committed", written, total)
                raise
            written += len(chunk)
            logger.info("Committed chunk of %d records (%d/%d)", len(chunk), written, total)
        return written
