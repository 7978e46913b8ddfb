"""
Application Settings

Environment-driven configuration for the file drop service.
"""

import os
from pathlib import Path
from typing import Optional

SWEEPER_MODE_SCHEDULER = "scheduler"
SWEEPER_MODE_CELERY = "celery"
SWEEPER_MODE_OFF = "off"

METADATA_BACKEND_LOCAL = "local"
METADATA_BACKEND_REDIS = "redis"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class AppConfig:
    """Application configuration."""

    def __init__(
        self,
        data_dir: Optional[str] = None,
        metadata_backend: Optional[str] = None,
        sweeper_mode: Optional[str] = None,
        sweep_interval_seconds: Optional[float] = None,
        expire_unparseable_records: Optional[bool] = None,
    ):
        self.api_version = os.getenv("API_VERSION", "v1")
        self.flask_env = os.getenv("FLASK_ENV", "development")
        self.is_production = self.flask_env == "production"

        # Storage layout: <data_dir>/file holds the bytes, <data_dir>/info the records
        self.data_dir = Path(data_dir or os.getenv("FILEDROP_DATA_DIR", "./data"))
        self.metadata_backend = (
            metadata_backend
            or os.getenv("FILEDROP_METADATA_BACKEND", METADATA_BACKEND_LOCAL)
        ).lower()

        # Sweeper configuration
        self.sweeper_mode = (
            sweeper_mode or os.getenv("SWEEPER_MODE", SWEEPER_MODE_SCHEDULER)
        ).lower()
        if sweep_interval_seconds is None:
            sweep_interval_seconds = float(os.getenv("SWEEP_INTERVAL_SECONDS", 30))
        self.sweep_interval_seconds = sweep_interval_seconds
        if expire_unparseable_records is None:
            expire_unparseable_records = _env_flag("EXPIRE_UNPARSEABLE_RECORDS")
        self.expire_unparseable_records = expire_unparseable_records
        self.discovery_workers = int(os.getenv("DISCOVERY_WORKERS", 8))
        self.stale_write_seconds = float(os.getenv("STALE_WRITE_SECONDS", 3600))

        max_content_length = os.getenv("MAX_CONTENT_LENGTH")
        self.max_content_length = int(max_content_length) if max_content_length else None

        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def file_dir(self) -> Path:
        return self.data_dir / "file"

    @property
    def info_dir(self) -> Path:
        return self.data_dir / "info"
