# app/schemas.py
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    TypeAdapter,
    ValidationError as PydanticValidationError,
    field_validator,
    model_validator,
)

from app.utils.dates import compute_expiration, parse_date


class SiteStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    EXPIRED = "expired"


SITE_STATUSES = tuple(s.value for s in SiteStatus)

# Portuguese values stored by the first version of the tool
STATUS_ALIASES = {
    "ativo": SiteStatus.ACTIVE.value,
    "inativo": SiteStatus.INACTIVE.value,
    "vencido": SiteStatus.EXPIRED.value,
}

_url_adapter = TypeAdapter(AnyUrl)


def is_valid_url(value) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        _url_adapter.validate_python(value.strip())
    except PydanticValidationError:
        return False
    return True


def normalize_status(value) -> str:
    """Map a status (or one of its localized aliases) to its canonical value."""
    if isinstance(value, SiteStatus):
        return value.value
    if isinstance(value, str):
        token = value.strip()
        token = STATUS_ALIASES.get(token, token)
        if token in SITE_STATUSES:
            return token
    raise ValueError(f"status must be one of: {list(SITE_STATUSES)}")


class SiteData(BaseModel):
    """Editable fields of a license record; expiration is always derived."""

    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    site_url: str
    status: SiteStatus
    purchase_date: date
    order_code: str
    activation_date: date
    expiration_date: Optional[date] = None
    migration_date: Optional[date] = None
    renewed: bool = False

    @field_validator("site_url")
    @classmethod
    def site_url_must_be_absolute(cls, v):
        if not is_valid_url(v):
            raise ValueError("site_url must be a well-formed absolute URL")
        return v

    @field_validator("status", mode="before")
    @classmethod
    def status_must_be_known(cls, v):
        return normalize_status(v)

    @field_validator("purchase_date", "activation_date", mode="before")
    @classmethod
    def dates_must_be_iso(cls, v):
        return parse_date(v)

    @field_validator("migration_date", mode="before")
    @classmethod
    def blank_migration_is_none(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return parse_date(v)

    @field_validator("order_code")
    @classmethod
    def order_code_must_not_be_empty(cls, v):
        if not v:
            raise ValueError("order_code cannot be empty")
        return v

    @model_validator(mode="after")
    def derive_expiration(self):
        self.expiration_date = compute_expiration(self.activation_date)
        return self

    def editable_fields(self) -> dict:
        return self.model_dump(include=set(SiteData.model_fields))


class SiteRecord(SiteData):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SiteOut(SiteRecord):
    alert: Optional[str] = None  # "expired" | "expiring_soon"


class SiteListResponse(BaseModel):
    sites: List[SiteOut]


class SiteCreatedResponse(BaseModel):
    id: int


class ImportResponse(BaseModel):
    imported: int
