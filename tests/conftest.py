"""
Shared pytest fixtures and configuration for the filedrop test suite.

This module provides:
- Hypothesis configuration for property-based testing
- Stores, cache and clock fixtures
- A Flask app wired to a temporary data directory
"""

import os
import tempfile

# Importing celery_app builds an app; keep it away from ./data and the scheduler
os.environ.setdefault("FILEDROP_DATA_DIR", tempfile.mkdtemp(prefix="filedrop-tests-"))
os.environ.setdefault("SWEEPER_MODE", "off")

import pytest
from hypothesis import HealthCheck, Phase, settings

from filedrop.config.settings import SWEEPER_MODE_OFF, AppConfig
from filedrop.domain.file_storage.expiry_cache import ExpiryCache
from filedrop.infrastructure.local_blob_store import LocalBlobStore
from filedrop.infrastructure.local_metadata_store import LocalMetadataStore
from tests.fixtures.mock_repositories import (
    FakeClock,
    InMemoryBlobStore,
    InMemoryMetadataStore,
)

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "default"))


# =============================================================================
# Domain Fixtures
# =============================================================================

@pytest.fixture
def clock():
    """Provide a fixed, manually advanced millisecond clock."""
    return FakeClock()


@pytest.fixture
def cache():
    return ExpiryCache()


@pytest.fixture
def sample_file_id() -> str:
    return "0123456789abcdef0123456789abcdef"


# =============================================================================
# Repository Fixtures
# =============================================================================

@pytest.fixture
def memory_metadata_store():
    return InMemoryMetadataStore()


@pytest.fixture
def memory_blob_store():
    return InMemoryBlobStore()


@pytest.fixture
def local_metadata_store(tmp_path):
    return LocalMetadataStore(str(tmp_path / "info"))


@pytest.fixture
def local_blob_store(tmp_path):
    return LocalBlobStore(str(tmp_path / "file"))


# =============================================================================
# Flask Fixtures
# =============================================================================

@pytest.fixture
def app_config(tmp_path):
    """Configuration pointing at a per-test data directory, sweeper off."""
    return AppConfig(data_dir=str(tmp_path), sweeper_mode=SWEEPER_MODE_OFF)


@pytest.fixture
def app(app_config):
    from app_factory import create_app

    flask_app = create_app(app_config)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


# =============================================================================
# Pytest Configuration Hooks
# =============================================================================

def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their location.

    - tests/unit/* -> @pytest.mark.unit
    - tests/integration/* -> @pytest.mark.integration
    - tests/contracts/* -> @pytest.mark.contract
    - tests/property/* -> @pytest.mark.property
    """
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path or "\\unit\\" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path or "\\integration\\" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/contracts/" in test_path or "\\contracts\\" in test_path:
            item.add_marker(pytest.mark.contract)
        elif "/property/" in test_path or "\\property\\" in test_path:
            item.add_marker(pytest.mark.property)
