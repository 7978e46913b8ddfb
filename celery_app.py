"""
Celery Application Instance

Creates the Celery app instance for workers and the beat scheduler when
sweeps run under Celery (SWEEPER_MODE=celery) instead of in-process.
"""

from app_factory import create_app
from filedrop.config.settings import SWEEPER_MODE_CELERY, AppConfig

# Workers never run the in-process scheduler, whatever SWEEPER_MODE says
flask_app = create_app(AppConfig(sweeper_mode=SWEEPER_MODE_CELERY))

celery_app = flask_app.celery

# Task modules are imported by name when the worker starts, after
# `celery_app` exists, to avoid a circular import at module load.
celery_app.conf.imports = (
    "filedrop.tasks.sweep_task",
)
