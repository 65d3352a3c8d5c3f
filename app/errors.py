# app/errors.py


class SiteLicenseError(Exception):
    """Base class for every error raised by the site license core."""


class ParseError(SiteLicenseError):
    """The CSV payload could not be read."""


class ValidationError(SiteLicenseError):
    """Rows failed schema or business-rule checks.

    ``errors`` keeps every message in the order it was produced.
    """

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "validation failed")


class InvalidDateError(SiteLicenseError, ValueError):
    """A value passed to date arithmetic is not a calendar date."""


class StoreError(SiteLicenseError):
    """Opaque failure from the persistence layer (network, quota, database)."""


class SiteNotFoundError(StoreError):
    def __init__(self, site_id):
        self.site_id = site_id
        super().__init__(f"Site {site_id} not found")
