# diary/config.py
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _as_bool(v: Optional[str], default=False) -> bool:
    if v is None:
        return default
    return str(v).strip().lower() in {"1", "true", "yes", "y", "on"}


def _as_int(v: Optional[str], default: int) -> int:
    try:
        return int(str(v).strip())
    except Exception:
        return default


def _normalize_url(u: str) -> str:
    if u.startswith("sqlite:///") and "+aiosqlite" not in u:
        return u.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return u


class Settings:
    def __init__(self) -> None:
        # environment
        self.environment = (os.getenv("ENV") or os.getenv("APP_ENV") or "dev").strip().lower()

        # storage backend: "memory" or "sql"
        self.store = (os.getenv("DIARY_STORE") or "memory").strip().lower()
        if self.store not in {"memory", "sql"}:
            self.store = "memory"

        self.database_url = self._resolve_database_url()

        # owner scope of the sql store (auth is handled upstream)
        self.user_id = _as_int(os.getenv("DIARY_USER_ID"), 1)

        # analytics defaults
        self.risk_window_days = max(1, _as_int(os.getenv("RISK_WINDOW_DAYS"), 14))
        self.search_page_limit = max(1, _as_int(os.getenv("SEARCH_PAGE_LIMIT"), 10))

        # misc
        self.seed_demo = _as_bool(os.getenv("DIARY_SEED_DEMO"), False)
        self.debug = _as_bool(os.getenv("DEBUG"), False)

    def _resolve_database_url(self) -> str:
        # 1) explicit override (highest priority)
        explicit = (os.getenv("DATABASE_URL") or os.getenv("DB_URL") or "").strip()
        if explicit:
            return _normalize_url(explicit)

        # 2) env-specific vars
        env_key = self.environment.upper()
        scoped = (os.getenv(f"DATABASE_URL_{env_key}") or os.getenv(f"DB_URL_{env_key}") or "").strip()
        if scoped:
            return _normalize_url(scoped)

        return "sqlite+aiosqlite:///./diary.sqlite3"

    @property
    def is_prod(self) -> bool:
        return self.environment in {"prod", "production"}


settings = Settings()
