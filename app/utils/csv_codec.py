# app/utils/csv_codec.py
# CSV <-> rows. Import matches columns by name, export uses a fixed order.
import csv
import io
import logging
from typing import Dict, Iterable, List, Union

from app.errors import ParseError

logger = logging.getLogger(__name__)

# (csv column, record attribute)
EXPORT_COLUMNS = (
    ("siteUrl", "site_url"),
    ("status", "status"),
    ("purchaseDate", "purchase_date"),
    ("orderCode", "order_code"),
    ("activationDate", "activation_date"),
    ("expirationDate", "expiration_date"),
    ("migrationDate", "migration_date"),
    ("renewed", "renewed"),
)

CSV_HEADER = [column for column, _ in EXPORT_COLUMNS]


def decode(data: Union[bytes, str]) -> List[Dict[str, str]]:
    """Parse CSV text with a header row into one dict per data row."""
    if isinstance(data, bytes):
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ParseError(f"CSV file is not valid UTF-8: {exc}") from exc
    else:
        text = data.lstrip("\ufeff")

    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    header = None
    rows = []
    try:
        for cells in reader:
            if not any(cell.strip() for cell in cells):
                continue
            if header is None:
                header = [name.strip() for name in cells]
                continue
            if len(cells) > len(header):
                logger.warning("CSV line %d has %d cells, header has %d; extra cells dropped",
                               reader.line_num, len(cells), len(header))
            padded = cells + [""] * (len(header) - len(cells))
            rows.append(dict(zip(header, padded)))
    except csv.Error as exc:
        raise ParseError(f"Malformed CSV near line {reader.line_num}: {exc}") from exc

    return rows


def _cell(record, attr) -> str:
    value = getattr(record, attr)
    if attr == "renewed":
        return "true" if value else "false"
    if value is None:
        return ""
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(getattr(value, "value", value))


def encode(records: Iterable) -> bytes:
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(CSV_HEADER)
    for record in records:
        writer.writerow([_cell(record, attr) for _, attr in EXPORT_COLUMNS])
    return buf.getvalue().encode("utf-8")
