"""Shared fixtures for mobsf-mcp tests."""

import pytest

from mobsf_mcp import server
from mobsf_mcp.clients import MobSFClient

BASE_URL = "http://mobsf.test"
API_KEY = "test-api-key"


@pytest.fixture
def mobsf_client():
    return MobSFClient(BASE_URL + "/", API_KEY, timeout=5)


@pytest.fixture
def server_client(monkeypatch, mobsf_client):
    """Point the MCP server at the fake MobSF instance."""
    monkeypatch.setattr(server, "mobsf_client", mobsf_client)
    return mobsf_client


@pytest.fixture
def sample_report():
    return {
        "version": "v4.0.0",
        "file_name": "diva.apk",
        "app_name": "Diva",
        "md5": "0123456789abcdef0123456789abcdef",
        "permissions": {
            "android.permission.INTERNET": {
                "status": "normal",
                "info": "full Internet access",
            }
        },
        "trackers": {"detected_trackers": 0, "total_trackers": 432},
        "exported_count": {"exported_activities": 0},
        "custom_key": [],
    }
