"""
Application Factory

Creates and configures the Flask application with all dependencies.
This factory pattern improves testability by allowing dependency injection
and configuration overrides.
"""

import atexit
import logging
from typing import Optional

from flask import Flask, Response, jsonify
from flask_cors import CORS

from filedrop.api.health import get_health_status
from filedrop.application.dependency_container import DependencyContainer
from filedrop.application.ingestion_service import IngestionService
from filedrop.application.reclamation_sweeper import ReclamationSweeper
from filedrop.application.retrieval_service import RetrievalService
from filedrop.config.settings import (
    SWEEPER_MODE_CELERY,
    SWEEPER_MODE_OFF,
    SWEEPER_MODE_SCHEDULER,
    AppConfig,
)
from filedrop.domain.file_storage.expiry_cache import ExpiryCache
from filedrop.domain.file_storage.repositories import BlobStore, MetadataStore
from filedrop.infrastructure.storage_factory import StorageFactory

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once; later calls only adjust the level."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


def create_app(config: Optional[AppConfig] = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Application configuration, uses default if None

    Returns:
        Configured Flask application
    """
    if config is None:
        config = AppConfig()

    configure_logging(config.log_level)

    app = Flask(__name__)
    app.filedrop_config = config
    if config.max_content_length:
        app.config["MAX_CONTENT_LENGTH"] = config.max_content_length

    # The JSON API may be called from other origins; the pages are same-origin
    CORS(
        app,
        resources={
            r"/api/*": {
                "origins": "*",
                "methods": ["GET", "OPTIONS"],
                "allow_headers": ["Content-Type"],
                "max_age": 3600,
            }
        },
    )

    _initialize_services(app, config)
    _initialize_sweeper(app, config)
    _register_blueprints(app, config)
    _register_error_handlers(app)
    _register_health_endpoint(app)

    return app


def _initialize_services(app: Flask, config: AppConfig) -> None:
    """
    Build the stores, cache and services and register them in a
    DependencyContainer attached to the app.

    Routes and tasks resolve services via app.container.resolve().
    If storage cannot be initialized the app still starts, with
    app.container set to None, and requests answer 503.
    """
    app.container = None
    app.sweeper = None

    try:
        container = DependencyContainer()

        metadata_store = StorageFactory.create_metadata_store(config)
        blob_store = StorageFactory.create_blob_store(config)
        cache = ExpiryCache()

        container.register_singleton(MetadataStore, metadata_store)
        container.register_singleton(BlobStore, blob_store)
        container.register_singleton(ExpiryCache, cache)

        sweeper = ReclamationSweeper(
            metadata_store,
            blob_store,
            cache,
            expire_unparseable_records=config.expire_unparseable_records,
            max_workers=config.discovery_workers,
            stale_write_seconds=config.stale_write_seconds,
        )
        container.register_singleton(ReclamationSweeper, sweeper)
        container.register_singleton(
            IngestionService, IngestionService(metadata_store, blob_store)
        )
        container.register_singleton(
            RetrievalService, RetrievalService(blob_store, metadata_store, cache)
        )

        app.container = container
        app.sweeper = sweeper
        logger.info("Application services initialized")

    except Exception as e:
        logger.error(f"Could not initialize services: {e}", exc_info=True)


def _initialize_sweeper(app: Flask, config: AppConfig) -> None:
    """
    Start the reclamation sweep according to SWEEPER_MODE.

    - scheduler: in-process APScheduler job, stopped at interpreter exit
    - celery: Celery beat drives tasks.sweep_expired_files
    - off: no sweeps
    """
    app.sweep_scheduler = None
    app.celery = None

    mode = config.sweeper_mode
    if mode == SWEEPER_MODE_CELERY:
        from filedrop.config.celery_config import make_celery

        app.celery = make_celery(app, config.sweep_interval_seconds)
        logger.info("Sweeps delegated to Celery beat")
        return

    if mode == SWEEPER_MODE_OFF:
        logger.info("Sweeper disabled")
        return

    if mode != SWEEPER_MODE_SCHEDULER:
        logger.warning(f"Unknown SWEEPER_MODE {mode!r}, sweeper disabled")
        return

    if app.sweeper is None:
        logger.warning("Sweeper not started: services failed to initialize")
        return

    from filedrop.application.sweep_scheduler import SweepScheduler

    scheduler = SweepScheduler(app.sweeper, config.sweep_interval_seconds)
    scheduler.start()
    atexit.register(scheduler.shutdown)
    app.sweep_scheduler = scheduler


def _register_blueprints(app: Flask, config: AppConfig) -> None:
    """
    Register the upload/download pages and the versioned JSON API.
    """
    from filedrop.api.pages import pages_bp
    from filedrop.api.v1 import create_api_blueprint

    app.register_blueprint(pages_bp)
    app.register_blueprint(create_api_blueprint())

    logger.debug(
        f"API {config.api_version} registered at /api/{config.api_version} "
        f"with Swagger UI at /api/{config.api_version}/docs"
    )


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(404)
    def page_not_found(error):
        return Response("Page not found\n", status=404, mimetype="text/plain")


def _register_health_endpoint(app: Flask) -> None:
    """
    Register health check endpoint.
    """

    @app.route("/health", methods=["GET"])
    def health():
        """
        Health check endpoint.
        Returns overall health status of the application and its dependencies.
        """
        health_status, status_code = get_health_status(app)
        return jsonify(health_status), status_code
