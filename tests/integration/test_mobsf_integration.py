"""
End-to-end checks against a live MobSF server.

Run with: MOBSF_URL=... MOBSF_API_KEY=... pytest tests/integration -m integration
"""

import pytest

from mobsf_mcp.clients import MobSFClient
from mobsf_mcp.exceptions import MobSFAPIError


@pytest.mark.integration
class TestMobSFIntegration:
    @pytest.mark.asyncio
    async def test_recent_scans_shape(self, live_client):
        result = await live_client.get_recent_scans(1, 5)

        assert isinstance(result, dict)
        for item in result.get("content", []):
            assert "MD5" in item

    @pytest.mark.asyncio
    async def test_bad_key_is_rejected(self, live_client):
        client = MobSFClient(live_client.base_url, "not-a-real-key")

        with pytest.raises(MobSFAPIError, match="MobSF API Error"):
            await client.get_recent_scans(1, 1)

    @pytest.mark.asyncio
    async def test_upload_returns_hash(self, live_client, sample_app):
        upload = await live_client.upload_file(sample_app)

        assert upload["hash"]
        assert "scan_type" in upload
