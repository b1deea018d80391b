from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import unquote


def _env_list(name: str, default: str) -> list[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    app_name: str = os.getenv("APP_NAME", "Gigboard")
    environment: str = os.getenv("ENV", "development")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./db/gigboard.db")
    storage_backend: str = os.getenv("STORAGE_BACKEND", "sql").lower()
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    auth_secret: str = os.getenv("AUTH_SECRET", "gigboard-dev-secret")
    auth_token_ttl_seconds: int = int(os.getenv("AUTH_TOKEN_TTL_SECONDS", str(60 * 60 * 24 * 7)))
    max_message_length: int = int(os.getenv("MAX_MESSAGE_LENGTH", "4000"))
    realtime_require_token: bool = os.getenv("REALTIME_REQUIRE_TOKEN", "true").lower() == "true"
    cors_origins: list[str] = field(
        default_factory=lambda: _env_list(
            "CORS_ORIGINS",
            "http://localhost,http://localhost:5173,http://localhost:8000,http://127.0.0.1:8000",
        )
    )

    @property
    def debug(self) -> bool:
        return self.environment == "development"

    def ensure_directories(self) -> None:
        self._ensure_sqlite_directory()

    def _ensure_sqlite_directory(self) -> None:
        if not self.database_url.startswith("sqlite:///"):
            return
        raw_path = self.database_url.replace("sqlite:///", "", 1)
        if not raw_path or raw_path == ":memory:":
            return
        db_path = Path(unquote(raw_path))
        if not db_path.is_absolute():
            db_path = Path(".") / db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)


settings = Settings()
