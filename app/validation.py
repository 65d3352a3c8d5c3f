# app/validation.py
# Validation and normalization of imported CSV rows.
from dataclasses import dataclass, field
from typing import List, Mapping, Sequence

from pydantic import ValidationError as PydanticValidationError

from app.schemas import SITE_STATUSES, SiteData, is_valid_url, normalize_status
from app.utils.dates import is_valid_date

REQUIRED_FIELDS = ("siteUrl", "status", "purchaseDate", "orderCode", "activationDate")

# "sim" is the Portuguese yes the first version of the tool exported
TRUTHY_TOKENS = ("true", "yes", "sim")


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)
    sites: List[SiteData] = field(default_factory=list)


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def coerce_renewed(value) -> bool:
    if value is True:
        return True
    return isinstance(value, str) and value in TRUTHY_TOKENS


def _status_ok(value) -> bool:
    try:
        normalize_status(value)
    except ValueError:
        return False
    return True


def _check_row(number: int, row: Mapping) -> List[str]:
    errors = []

    for name in REQUIRED_FIELDS:
        if _blank(row.get(name)):
            errors.append(f"Row {number}: missing value for {name}")

    site_url = row.get("siteUrl")
    if not _blank(site_url) and not is_valid_url(site_url):
        errors.append(f"Row {number}: invalid URL format for {site_url}")

    status = row.get("status")
    if not _blank(status) and not _status_ok(status):
        allowed = ", ".join(f"'{s}'" for s in SITE_STATUSES)
        errors.append(f"Row {number}: invalid status value ({status}). Must be one of {allowed}")

    for name, label in (("purchaseDate", "purchase date"), ("activationDate", "activation date")):
        value = row.get(name)
        if not _blank(value) and not is_valid_date(value):
            errors.append(f"Row {number}: invalid {label} format ({value})")

    migration = row.get("migrationDate")
    if not _blank(migration) and not is_valid_date(migration):
        errors.append(f"Row {number}: invalid migration date format ({migration})")

    return errors


def _normalize(row: Mapping) -> SiteData:
    migration = row.get("migrationDate")
    return SiteData(
        site_url=row["siteUrl"],
        status=row["status"],
        purchase_date=row["purchaseDate"],
        order_code=row["orderCode"],
        activation_date=row["activationDate"],
        migration_date=None if _blank(migration) else migration,
        renewed=coerce_renewed(row.get("renewed")),
    )


def validate_rows(rows: Sequence[Mapping]) -> ValidationResult:
    """Check every row and, when all pass, normalize them into ``SiteData``.

    Errors accumulate across rows. The two header-level checks (empty file,
    missing columns) stop immediately since row checks would be noise.
    """
    if not rows:
        return ValidationResult(valid=False, errors=["CSV file is empty"])

    missing = [name for name in REQUIRED_FIELDS if name not in rows[0].keys()]
    if missing:
        return ValidationResult(valid=False, errors=[f"Missing required columns: {', '.join(missing)}"])

    errors = []
    for number, row in enumerate(rows, start=1):
        errors.extend(_check_row(number, row))

    if errors:
        return ValidationResult(valid=False, errors=errors)

    sites = []
    for number, row in enumerate(rows, start=1):
        try:
            sites.append(_normalize(row))
        except PydanticValidationError as exc:
            for err in exc.errors():
                errors.append(f"Row {number}: {err['msg']}")

    if errors:
        return ValidationResult(valid=False, errors=errors)
    return ValidationResult(valid=True, sites=sites)
