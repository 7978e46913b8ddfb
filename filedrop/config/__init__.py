"""Configuration for the application, Redis and Celery."""

from .settings import (
    METADATA_BACKEND_LOCAL,
    METADATA_BACKEND_REDIS,
    SWEEPER_MODE_CELERY,
    SWEEPER_MODE_OFF,
    SWEEPER_MODE_SCHEDULER,
    AppConfig,
)

__all__ = [
    "AppConfig",
    "METADATA_BACKEND_LOCAL",
    "METADATA_BACKEND_REDIS",
    "SWEEPER_MODE_CELERY",
    "SWEEPER_MODE_OFF",
    "SWEEPER_MODE_SCHEDULER",
]
