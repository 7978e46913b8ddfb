"""
Celery Configuration

Configures Celery with Flask integration, Redis broker and the beat
schedule that drives the reclamation sweep when SWEEPER_MODE=celery.
"""

import os

from celery import Celery
from kombu import Queue

SWEEP_TASK_NAME = "tasks.sweep_expired_files"


class CeleryConfig:
    """Celery configuration settings."""

    # Broker settings
    broker_url = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
    result_backend = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/0")

    # Task settings
    task_serializer = "json"
    accept_content = ["json"]
    result_serializer = "json"
    timezone = "UTC"
    enable_utc = True

    # Worker settings
    worker_prefetch_multiplier = 1
    task_acks_late = True

    # Task routing
    task_routes = {
        SWEEP_TASK_NAME: {"queue": "sweep_queue"},
    }

    task_default_queue = "default"
    task_queues = (
        Queue("default", routing_key="default"),
        Queue("sweep_queue", routing_key="sweep"),
    )

    # Sweep results are only useful for a short while
    result_expires = 600


def make_celery(app, sweep_interval_seconds: float = 30.0):
    """
    Create Celery instance with Flask app context.

    Args:
        app: Flask application instance
        sweep_interval_seconds: Period of the beat-scheduled sweep

    Returns:
        Configured Celery instance
    """
    celery = Celery(
        app.import_name,
        backend=CeleryConfig.result_backend,
        broker=CeleryConfig.broker_url,
    )

    celery.config_from_object(CeleryConfig)
    celery.conf.beat_schedule = {
        "sweep-expired-files": {
            "task": SWEEP_TASK_NAME,
            "schedule": sweep_interval_seconds,
        },
    }

    # Ensure tasks run within Flask app context
    class ContextTask(celery.Task):
        """Make celery tasks work with Flask app context."""

        def __call__(self, *args, **kwargs):
            with app.app_context():
                return self.run(*args, **kwargs)

    celery.Task = ContextTask
    return celery
