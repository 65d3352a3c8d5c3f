# app/main.py
from fastapi import FastAPI

from app.config import settings
from app.routes import sites as sites_router
from app.utils.logging import configure_logging

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Site License Tracker")

app.include_router(sites_router.router)


@app.get("/healthz")
def healthz():
    return {"ok": True, "store": settings.STORE_BACKEND}
