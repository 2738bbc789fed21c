import os
from dataclasses import dataclass
from pathlib import Path

try:
    from dotenv import load_dotenv

    # Always load .env from the project root (stable, regardless of CWD)
    BASE_DIR = Path(__file__).resolve().parents[2]
    load_dotenv(dotenv_path=BASE_DIR / ".env", override=False)
except ImportError:
    # dotenv is optional; if not installed, env vars still work
    pass


@dataclass(frozen=True)
class Settings:
    database_url: str = os.getenv("DATABASE_URL", "sqlite+pysqlite:///./nota.db")
    env: str = os.getenv("ENV", "local")

    # Used to build back-links to the annotation UI inside exported files
    nota_host: str = os.getenv("NOTA_HOST", "")

    # Threads used to load sidecar annotation documents during ingestion
    ingest_workers: int = int(os.getenv("NOTA_INGEST_WORKERS", "1"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
