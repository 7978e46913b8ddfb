"""
Sweep Task

Celery beat task that runs the reclamation sweep on a worker. Each worker
process keeps its own expiry cache, rebuilt from the metadata store by the
discovery phase.
"""

import logging

import celery_app as celery_module
from celery_app import celery_app
from filedrop.application.reclamation_sweeper import ReclamationSweeper
from filedrop.config.celery_config import SWEEP_TASK_NAME

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name=SWEEP_TASK_NAME)
def sweep_expired_files(self):
    """
    Periodic task that discovers new records and removes expired files.

    Returns:
        dict: Sweep statistics with counts and errors
    """
    return run_sweep(celery_module.flask_app.container)


def run_sweep(container) -> dict:
    """
    Resolve the sweeper from the container and run one sweep.

    Returns:
        dict: Sweep statistics; an error entry if services are unavailable
    """
    logger.info("Starting sweep task")

    if container is None:
        error_msg = "Sweep task failed: services not initialized"
        logger.error(error_msg)
        return {"discovered": 0, "reclaimed": 0, "errors": [error_msg]}

    sweeper = container.resolve(ReclamationSweeper)
    return sweeper.run_once().to_dict()
