# app/config.py
import os

from dotenv import load_dotenv

load_dotenv()


def _database_url() -> str:
    url = os.environ.get("DATABASE_URL", "sqlite:///./sites.db")
    # hosted providers still hand out the old scheme
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


class Settings:
    DATABASE_URL = _database_url()
    STORE_BACKEND = os.environ.get("STORE_BACKEND", "sql")  # sql | supabase
    SUPABASE_URL = os.environ.get("SUPABASE_URL", "")  # e.g. https://xyzcompany.supabase.co
    SUPABASE_SERVICE_KEY = os.environ.get("SUPABASE_SERVICE_KEY", "")  # service_role key (keep secret)
    SITES_TABLE = os.environ.get("SITES_TABLE", "sites")
    REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", "8"))
    BATCH_CHUNK_SIZE = int(os.environ.get("BATCH_CHUNK_SIZE", "400"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    HOST = os.environ.get("HOST", "0.0.0.0")
    PORT = int(os.environ.get("PORT", "8000"))


settings = Settings()
