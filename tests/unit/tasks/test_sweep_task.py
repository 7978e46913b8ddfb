"""
Unit Tests for Sweep Task

Tests the Celery beat task that runs the reclamation sweep. The task only
reaches storage through the ReclamationSweeper resolved from the container.
"""

import unittest
from unittest.mock import Mock, patch

from filedrop.application.reclamation_sweeper import ReclamationSweeper, SweepResult


class TestSweepTaskUnit(unittest.TestCase):
    """Unit tests with a mocked container."""

    def setUp(self):
        self.mock_sweeper = Mock()
        self.mock_sweeper.run_once.return_value = SweepResult(
            started_at=1, finished_at=2, discovered=3, reclaimed=2, errors=[]
        )
        self.mock_container = Mock()
        self.mock_container.resolve = Mock(side_effect=lambda cls: {
            ReclamationSweeper: self.mock_sweeper,
        }.get(cls, Mock()))

    def test_run_sweep_resolves_sweeper_and_returns_counts(self):
        from filedrop.tasks.sweep_task import run_sweep

        result = run_sweep(self.mock_container)

        self.mock_container.resolve.assert_called_once_with(ReclamationSweeper)
        self.mock_sweeper.run_once.assert_called_once()
        self.assertEqual(result["discovered"], 3)
        self.assertEqual(result["reclaimed"], 2)
        self.assertEqual(result["errors"], [])

    def test_run_sweep_without_container(self):
        from filedrop.tasks.sweep_task import run_sweep

        result = run_sweep(None)

        self.assertEqual(result["reclaimed"], 0)
        self.assertEqual(len(result["errors"]), 1)

    def test_task_uses_worker_app_container(self):
        import celery_app as celery_module
        from filedrop.tasks.sweep_task import sweep_expired_files

        with patch.object(celery_module.flask_app, "container", self.mock_container):
            result = sweep_expired_files()

        self.mock_sweeper.run_once.assert_called_once()
        self.assertEqual(result["reclaimed"], 2)

    def test_task_is_registered_under_beat_name(self):
        from filedrop.config.celery_config import SWEEP_TASK_NAME
        from filedrop.tasks.sweep_task import sweep_expired_files

        self.assertEqual(sweep_expired_files.name, SWEEP_TASK_NAME)

    def test_beat_schedule_targets_sweep_task(self):
        import celery_app as celery_module
        from filedrop.config.celery_config import SWEEP_TASK_NAME

        schedule = celery_module.celery_app.conf.beat_schedule
        self.assertEqual(schedule["sweep-expired-files"]["task"], SWEEP_TASK_NAME)
