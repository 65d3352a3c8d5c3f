# app/routes/sites.py
import logging
from datetime import date

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status

from app.catalog import SiteCatalog
from app.errors import ParseError, SiteNotFoundError, StoreError, ValidationError
from app.importer import export_csv, export_filename, import_csv
from app.schemas import ImportResponse, SiteCreatedResponse, SiteData, SiteListResponse, SiteOut
from app.stores import SiteStore, get_store
from app.utils.dates import expiry_alert

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sites", tags=["sites"])


def get_today() -> date:
    return date.today()


def store_failure(exc: StoreError) -> HTTPException:
    logger.error("Store operation failed: %s", exc)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


def filtered_catalog(store: SiteStore, search: str, status_filter: str) -> SiteCatalog:
    try:
        sites = store.list_sites()
    except StoreError as exc:
        raise store_failure(exc)

    catalog = SiteCatalog(sites)
    catalog.set_search_term(search)
    try:
        catalog.set_status_filter(status_filter)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return catalog


@router.get("", response_model=SiteListResponse)
def list_sites(search: str = "", status_filter: str = Query("all", alias="status"), store: SiteStore = Depends(get_store),
               today: date = Depends(get_today)):
    catalog = filtered_catalog(store, search, status_filter)
    out = []
    for site in catalog.filtered_view():
        out.append(SiteOut(**site.model_dump(), alert=expiry_alert(site, today)))
    return {"sites": out}


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SiteCreatedResponse)
def create_site(site: SiteData, store: SiteStore = Depends(get_store)):
    try:
        site_id = store.create_site(site)
    except StoreError as exc:
        raise store_failure(exc)
    logger.info("Created site %s (%s)", site_id, site.site_url)
    return {"id": site_id}


@router.put("/{site_id}")
def update_site(site_id: int, site: SiteData, store: SiteStore = Depends(get_store)):
    try:
        store.update_site(site_id, site)
    except SiteNotFoundError:
        raise HTTPException(status_code=404, detail="Site not found")
    except StoreError as exc:
        raise store_failure(exc)
    return {"ok": True}


@router.delete("/{site_id}")
def delete_site(site_id: int, store: SiteStore = Depends(get_store)):
    try:
        store.delete_site(site_id)
    except SiteNotFoundError:
        raise HTTPException(status_code=404, detail="Site not found")
    except StoreError as exc:
        raise store_failure(exc)
    logger.info("Deleted site %s", site_id)
    return {"ok": True}


@router.post("/import", response_model=ImportResponse)
def import_sites(file: UploadFile = File(...), store: SiteStore = Depends(get_store)):
    data = file.file.read()

    def log_progress(fraction: float):
        logger.debug("Import %s: %d%%", file.filename, round(fraction * 100))

    try:
        imported = import_csv(data, store, progress=log_progress)
    except ParseError as exc:
        raise HTTPException(status_code=400, detail={"errors": [str(exc)]})
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail={"errors": exc.errors})
    except StoreError as exc:
        raise store_failure(exc)
    return {"imported": imported}


@router.get("/export")
def export_sites(search: str = "", status_filter: str = Query("all", alias="status"), store: SiteStore = Depends(get_store),
                 today: date = Depends(get_today)):
    catalog = filtered_catalog(store, search, status_filter)
    return Response(
        content=export_csv(catalog.filtered_view()),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(today)}"'},
    )
