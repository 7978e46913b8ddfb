"""
Application Layer

Orchestrates uploads, downloads and the reclamation sweep on top of the
domain contracts.
"""

from .dependency_container import DependencyContainer, DependencyNotFoundError
from .ingestion_service import IngestionService
from .reclamation_sweeper import ReclamationSweeper, SweepResult
from .retrieval_service import DownloadTarget, RetrievalService

__all__ = [
    "DependencyContainer",
    "DependencyNotFoundError",
    "DownloadTarget",
    "IngestionService",
    "ReclamationSweeper",
    "RetrievalService",
    "SweepResult",
]
