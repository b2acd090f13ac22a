import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env(name: str) -> str:
    v = os.environ.get(name)
    if not v:
        raise RuntimeError(f"{name} missing from environment")
    return v


def _flag(name: str, default: str) -> bool:
    return (os.environ.get(name) or default).lower() not in ("false", "0", "no")


def _dsn() -> str:
    url = os.environ.get("DATABASE_URL")
    if url:
        return url
    host = os.environ.get("POSTGRES_HOST") or "localhost"
    db = os.environ.get("POSTGRES_DB") or "postgres"
    user = os.environ.get("POSTGRES_USER") or "postgres"
    password = os.environ.get("POSTGRES_PASSWORD") or ""
    port = os.environ.get("POSTGRES_PORT") or "5432"
    return f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{db}"


@dataclass(frozen=True)
class Settings:
    database_url: str
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    token_ttl_days: int = 7
    password_iterations: int = 100_000
    headless: bool = True
    probe_navigation_timeout_ms: int = 30_000
    probe_selector_timeout_ms: int = 10_000
    probe_timeout: float = 60.0
    probe_max_concurrency: int = 2
    probe_queue_timeout: float = 30.0
    port: int = 8000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, database_url: Optional[str] = None) -> "Settings":
        return cls(
            database_url=database_url or _dsn(),
            jwt_secret=_env("JWT_SECRET"),
            jwt_algorithm=os.environ.get("JWT_ALG") or "HS256",
            token_ttl_days=int(os.environ.get("TOKEN_TTL_DAYS") or 7),
            password_iterations=int(os.environ.get("PASSWORD_ITERATIONS") or 100_000),
            headless=_flag("HEADLESS", "true"),
            probe_navigation_timeout_ms=int(os.environ.get("PROBE_NAVIGATION_TIMEOUT_MS") or 30_000),
            probe_selector_timeout_ms=int(os.environ.get("PROBE_SELECTOR_TIMEOUT_MS") or 10_000),
            probe_timeout=float(os.environ.get("PROBE_TIMEOUT") or 60),
            probe_max_concurrency=int(os.environ.get("PROBE_MAX_CONCURRENCY") or 2),
            probe_queue_timeout=float(os.environ.get("PROBE_QUEUE_TIMEOUT") or 30),
            port=int(os.environ.get("PORT") or 8000),
            log_level=(os.environ.get("LOG_LEVEL") or "INFO").upper(),
        )
