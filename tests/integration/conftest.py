"""
Integration test configuration and fixtures.
These tests talk to a real MobSF instance and should be run separately from unit tests.
"""

import os

import pytest

from mobsf_mcp.clients import MobSFClient


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires a running MobSF)"
    )


@pytest.fixture
def live_client():
    """Client for the MobSF instance named by MOBSF_URL / MOBSF_API_KEY."""
    base_url = os.environ.get("MOBSF_URL")
    api_key = os.environ.get("MOBSF_API_KEY")
    if not base_url or not api_key:
        pytest.skip("MOBSF_URL and MOBSF_API_KEY required for integration tests")
    return MobSFClient(base_url, api_key, timeout=120)


@pytest.fixture
def sample_app():
    """Path to an app to upload, from MOBSF_SAMPLE_APP."""
    path = os.environ.get("MOBSF_SAMPLE_APP")
    if not path or not os.path.exists(path):
        pytest.skip("MOBSF_SAMPLE_APP must point to an apk/ipa/zip/appx file")
    return path
