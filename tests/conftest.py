# Test configuration
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).parent.parent

# Add repo root to path so tests can import modules
sys.path.insert(0, str(REPO_ROOT))

from swagger_gateway.config import get_settings  # noqa: E402
from swagger_gateway.schema.loader import load_schema  # noqa: E402

SCHEMA_PATH = REPO_ROOT / "config" / "schema.yaml"


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Each test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def users_schema():
    """The example users schema shipped in config/."""
    return load_schema(SCHEMA_PATH)
