# main.py
# Runs the site license API.
# Requirements: see pyproject.toml (fastapi, uvicorn, sqlalchemy, requests, python-dotenv)
# Run with: uvicorn app.main:app --host 0.0.0.0 --port 8000
import os

import uvicorn

from app.config import settings

if __name__ == "__main__":
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT,
                reload=os.environ.get("RELOAD", "0") == "1")
