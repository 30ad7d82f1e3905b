"""Runtime settings, read from ``CLINIC_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

# When installed in editable mode the project root is the repo root.
_PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_DB_PATH = _PROJECT_ROOT / "data" / "clinic.db"

ENV = os.environ.get


@dataclass(frozen=True)
class Settings:
    db_path: Path = DEFAULT_DB_PATH
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 4000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @staticmethod
    def from_env() -> Settings:
        origins = [o.strip() for o in ENV("CLINIC_CORS_ORIGINS", "*").split(",") if o.strip()]
        return Settings(
            db_path=Path(ENV("CLINIC_DB_PATH", str(DEFAULT_DB_PATH))),
            log_level=ENV("CLINIC_LOG_LEVEL", "INFO").upper(),
            host=ENV("CLINIC_HOST", "127.0.0.1"),
            port=int(ENV("CLINIC_PORT", "4000")),
            cors_origins=origins or ["*"],
        )

    def with_db_path(self, db_path: Path | str | None) -> Settings:
        if db_path is None:
            return self
        return replace(self, db_path=Path(db_path))
