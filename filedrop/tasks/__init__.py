"""Background tasks run by Celery workers."""
