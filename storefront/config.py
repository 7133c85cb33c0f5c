# storefront/config.py
import os
from dataclasses import dataclass, field, replace
from typing import List


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # "sql" or "memory"
    store_backend: str = "sql"
    database_url: str = "sqlite+aiosqlite:///./storefront.db"
    db_echo: bool = False

    jwt_secret: str = "storefront-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 7 * 24 * 60
    auth_cookie_name: str = "token"
    cookie_secure: bool = False

    rate_limit_enabled: bool = True
    auth_rate_limit: int = 10
    auth_rate_window_seconds: int = 15 * 60
    contact_rate_limit: int = 5
    contact_rate_window_seconds: int = 60 * 60

    seed_demo_products: bool = True
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    log_level: str = "INFO"
    log_format: str = "text"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            store_backend=os.getenv("STORE_BACKEND", "sql").strip().lower(),
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            db_echo=_flag("DB_ECHO", "0"),
            jwt_secret=os.getenv("JWT_SECRET", cls.jwt_secret),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            access_token_expire_minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(7 * 24 * 60))),
            auth_cookie_name=os.getenv("AUTH_COOKIE_NAME", "token"),
            cookie_secure=_flag("COOKIE_SECURE", "0"),
            rate_limit_enabled=_flag("RATE_LIMIT_ENABLED", "1"),
            auth_rate_limit=int(os.getenv("AUTH_RATE_LIMIT", "10")),
            auth_rate_window_seconds=int(os.getenv("AUTH_RATE_WINDOW_SECONDS", "900")),
            contact_rate_limit=int(os.getenv("CONTACT_RATE_LIMIT", "5")),
            contact_rate_window_seconds=int(os.getenv("CONTACT_RATE_WINDOW_SECONDS", "3600")),
            seed_demo_products=_flag("SEED_DEMO_PRODUCTS", "1"),
            cors_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()],
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("LOG_FORMAT", "text").lower(),
        )

    def with_overrides(self, **changes) -> "Settings":
        return replace(self, **changes)
