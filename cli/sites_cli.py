# cli/sites_cli.py
# Local CLI to list, add, update, delete, import and export site licenses (uses the configured store)
import argparse
import sys
from datetime import date

from pydantic import ValidationError as PydanticValidationError

from app.config import settings
from app.importer import export_filename
from app.manager import SiteManager
from app.schemas import SiteData
from app.stores import build_store
from app.utils.dates import format_date
from app.utils.logging import configure_logging


def print_notification(level: str, message: str):
    stream = sys.stderr if level == "error" else sys.stdout
    print(message, file=stream)


def print_sites(manager: SiteManager):
    sites = manager.visible_sites()
    if not sites:
        print("No sites found")
        return
    for site in sites:
        alert = manager.alert_for(site)
        print(" | ".join([
            str(site.id),
            site.site_url,
            site.status + (f" ({alert})" if alert else ""),
            site.order_code,
            format_date(site.purchase_date),
            format_date(site.activation_date),
            format_date(site.expiration_date),
            format_date(site.migration_date),
            "renewed" if site.renewed else "-",
        ]))


def print_field_errors(exc: PydanticValidationError):
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"])
        print(f"{field}: {err['msg']}", file=sys.stderr)


def add_site(manager: SiteManager, args) -> int:
    try:
        site = SiteData(
            site_url=args.url,
            status=args.status,
            purchase_date=args.purchase,
            order_code=args.order,
            activation_date=args.activation,
            migration_date=args.migration,
            renewed=args.renewed,
        )
    except PydanticValidationError as exc:
        print_field_errors(exc)
        return 1
    site_id = manager.add_site(site)
    if site_id is None:
        return 1
    print("Site created:", site_id)
    print("Expires at:", site.expiration_date)
    return 0


UPDATE_OPTIONS = (
    ("url", "site_url"),
    ("status", "status"),
    ("purchase", "purchase_date"),
    ("order", "order_code"),
    ("activation", "activation_date"),
    ("migration", "migration_date"),
    ("renewed", "renewed"),
)


def update_site(manager: SiteManager, args) -> int:
    """Replace a record, keeping current values for options not given."""
    if not manager.refresh():
        return 1
    current = next((s for s in manager.catalog.sites if s.id == args.id), None)
    if current is None:
        print(f"Site {args.id} not found", file=sys.stderr)
        return 1

    fields = current.editable_fields()
    for option, name in UPDATE_OPTIONS:
        value = getattr(args, option)
        if value is not None:
            fields[name] = value
    try:
        site = SiteData(**fields)
    except PydanticValidationError as exc:
        print_field_errors(exc)
        return 1
    if not manager.update_site(args.id, site):
        return 1
    print("Site updated:", args.id)
    print("Expires at:", site.expiration_date)
    return 0


def import_file(manager: SiteManager, path: str) -> int:
    with open(path, "rb") as fh:
        data = fh.read()

    def show_progress(fraction: float):
        print(f"\rImporting... {round(fraction * 100)}%", end="", flush=True)

    report = manager.import_csv(data, progress=show_progress)
    print()
    for message in report.errors:
        print(message, file=sys.stderr)
    return 0 if report.ok else 1


def export_file(manager: SiteManager, path: str = None) -> int:
    path = path or export_filename(manager.today())
    with open(path, "wb") as fh:
        fh.write(manager.export_csv())
    print(f"Exported {len(manager.visible_sites())} sites to {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage site licenses")
    parser.add_argument("--store", choices=["sql", "supabase"], default=None,
                        help="Store backend (default: STORE_BACKEND)")
    sub = parser.add_subparsers(dest="action", required=True)

    for name in ("list", "export"):
        p = sub.add_parser(name)
        p.add_argument("--search", default="", help="Substring of the site URL")
        p.add_argument("--status", default="all", help="all/active/inactive/expired")
        if name == "export":
            p.add_argument("--out", help="Output file (default: site-licenses-<date>.csv)")

    p = sub.add_parser("add")
    p.add_argument("--url", required=True)
    p.add_argument("--status", default="active")
    p.add_argument("--purchase", default=date.today().isoformat(), help="YYYY-MM-DD")
    p.add_argument("--order", required=True, help="Order code")
    p.add_argument("--activation", default=date.today().isoformat(), help="YYYY-MM-DD")
    p.add_argument("--migration", default=None, help="YYYY-MM-DD")
    p.add_argument("--renewed", action="store_true")

    p = sub.add_parser("update")
    p.add_argument("--id", type=int, required=True)
    p.add_argument("--url")
    p.add_argument("--status")
    p.add_argument("--purchase", help="YYYY-MM-DD")
    p.add_argument("--order", help="Order code")
    p.add_argument("--activation", help="YYYY-MM-DD")
    p.add_argument("--migration", help="YYYY-MM-DD, empty string clears it")
    renewed = p.add_mutually_exclusive_group()
    renewed.add_argument("--renewed", dest="renewed", action="store_true", default=None)
    renewed.add_argument("--not-renewed", dest="renewed", action="store_false")

    p = sub.add_parser("delete")
    p.add_argument("--id", type=int, required=True)

    p = sub.add_parser("import")
    p.add_argument("file", help="CSV file with a header row")

    return parser


def main(argv=None, store=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(settings.LOG_LEVEL)

    manager = SiteManager(store or build_store(args.store), notify=print_notification)

    if args.action == "add":
        return add_site(manager, args)
    if args.action == "update":
        return update_site(manager, args)
    if args.action == "delete":
        return 0 if manager.delete_site(args.id) else 1
    if args.action == "import":
        return import_file(manager, args.file)

    if not manager.refresh():
        return 1
    manager.set_search_term(args.search)
    try:
        manager.set_status_filter(args.status)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 2

    if args.action == "list":
        print_sites(manager)
        return 0
    return export_file(manager, args.out)


if __name__ == "__main__":
    sys.exit(main())
