"""
Health Status

Shared health check used by /health and /api/v1/system/health.
"""

from flask import Flask

from filedrop.domain.file_storage.expiry_cache import ExpiryCache
from filedrop.domain.file_storage.repositories import MetadataStore


def get_health_status(app: Flask) -> tuple[dict, int]:
    """
    Get health status of all system components.

    Returns:
        Tuple of (health_status_dict, http_status_code)
    """
    config = app.filedrop_config
    health_status = {
        "status": "ok",
        "message": "backend ready",
        "storage": "unknown",
        "metadata_backend": config.metadata_backend,
        "sweeper_mode": config.sweeper_mode,
        "cache_entries": 0,
        "last_sweep": None,
    }

    container = getattr(app, "container", None)
    if container is None:
        health_status["status"] = "degraded"
        health_status["storage"] = "unavailable"
        return health_status, 503

    try:
        if container.resolve(MetadataStore).is_available():
            health_status["storage"] = "available"
        else:
            health_status["storage"] = "unavailable"
            health_status["status"] = "degraded"
    except Exception as e:
        health_status["storage"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    health_status["cache_entries"] = len(container.resolve(ExpiryCache))

    sweeper = getattr(app, "sweeper", None)
    if sweeper is not None and sweeper.last_result is not None:
        health_status["last_sweep"] = sweeper.last_result.to_dict()

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code
