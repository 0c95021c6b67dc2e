"""
Root conftest.py for all tests
Provides common fixtures and configuration
"""
import os
import sys

# Add project root to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Settings are read on import, pin the environment first
os.environ["ENVIRONMENT"] = "test"
os.environ["ENABLE_PAGESPEED"] = "false"
os.environ["LOG_FORMAT"] = "text"
os.environ.pop("GOOGLE_API_KEY", None)

import pytest  # noqa: E402

from core.config import get_settings  # noqa: E402
from d1_analysis.messages import MessageCatalog  # noqa: E402


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make every test see settings built from the current environment"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def catalog():
    """Fresh message catalog reading the bundled locale files"""
    return MessageCatalog()
