# app/importer.py
import logging
from datetime import date
from typing import Iterable, Optional, Union

from app.config import settings
from app.errors import ValidationError
from app.stores.base import MAX_CHUNK_SIZE, ProgressCallback, SiteStore
from app.utils.csv_codec import decode, encode
from app.validation import validate_rows

logger = logging.getLogger(__name__)

EXPORT_BASENAME = "site-licenses"


def import_csv(data: Union[bytes, str], store: SiteStore, progress: Optional[ProgressCallback] = None,
               chunk_size: int = None) -> int:
    """Parse, validate and persist a CSV upload. Returns the number of records written.

    Raises ParseError or ValidationError before anything is written, and
    StoreError if a chunk fails (earlier chunks stay committed).
    """
    rows = decode(data)
    result = validate_rows(rows)
    if not result.valid:
        logger.info("CSV import rejected with %d errors", len(result.errors))
        raise ValidationError(result.errors)

    chunk_size = min(chunk_size or settings.BATCH_CHUNK_SIZE, MAX_CHUNK_SIZE)
    written = store.create_batch(result.sites, chunk_size=chunk_size,
                                 progress=progress)
    logger.info("Imported %d sites", written)
    return written


def export_csv(sites: Iterable) -> bytes:
    return encode(sites)


def export_filename(today: date) -> str:
    return f"{EXPORT_BASENAME}-{today.isoformat()}.csv"
