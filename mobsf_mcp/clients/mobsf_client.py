"""Async client for the MobSF REST API.

Every public method maps to exactly one HTTP request against ``/api/v1`` and
returns the deserialized body. Non-2xx responses and transport failures are
raised as :class:`~mobsf_mcp.exceptions.MobSFAPIError`.
"""

import json
import logging
from pathlib import Path
from typing import Any

import httpx

from ..exceptions import MobSFAPIError

logger = logging.getLogger(__name__)

ERROR_PREFIX = "MobSF API Error"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _decode_body(response: httpx.Response) -> Any:
    """Return parsed JSON when the body is JSON, otherwise the raw text."""
    if not response.content:
        return ""
    try:
        return response.json()
    except ValueError:
        return response.text


def _describe_error_body(response: httpx.Response) -> str | None:
    """Pretty-print an error payload, or None when the response has no body."""
    if not response.content:
        return None
    try:
        return json.dumps(response.json(), indent=2, ensure_ascii=False)
    except ValueError:
        return response.text


class MobSFClient:
    """Client for a single MobSF instance.

    MobSF accepts the key in either ``Authorization`` or ``X-Mobsf-Api-Key``
    depending on the server version, so both are sent on every request.
    """

    API_PREFIX = "/api/v1"

    def __init__(self, base_url: str, api_key: str, timeout: float = 30) -> None:
        self.base_url = base_url[:-1] if base_url.endswith("/") else base_url
        self.api_key = api_key
        self.timeout = timeout

    @property
    def auth_headers(self) -> dict[str, str]:
        return {
            "Authorization": self.api_key,
            "X-Mobsf-Api-Key": self.api_key,
        }

    @property
    def form_headers(self) -> dict[str, str]:
        return {**self.auth_headers, "Content-Type": FORM_CONTENT_TYPE}

    def _url(self, path: str) -> str:
        return f"{self.base_url}{self.API_PREFIX}{path}"

    async def _send_request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        data: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        binary: bool = False,
    ) -> Any:
        url = self._url(path)
        logger.debug(f"{method} {url}")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, follow_redirects=True
            ) as client:
                response = await client.request(
                    method,
                    url,
                    headers=headers if headers is not None else self.auth_headers,
                    data=data,
                    files=files,
                    params=params,
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            body = _describe_error_body(e.response)
            raise MobSFAPIError(
                f"{ERROR_PREFIX}: {body if body is not None else e}",
                status_code=e.response.status_code,
                response_body=e.response.text or None,
            ) from e
        except httpx.RequestError as e:
            raise MobSFAPIError(f"{ERROR_PREFIX}: {e}") from e

        if binary:
            return response.content
        return _decode_body(response)

    async def _post_form(self, path: str, **fields: str) -> Any:
        return await self._send_request(
            "POST", path, headers=self.form_headers, data=fields
        )

    async def upload_file(self, file_path: str) -> Any:
        """Upload an apk, zip, ipa or appx file for analysis.

        Returns the upload response with ``file_name``, ``hash`` and ``scan_type``.
        No Content-Type header is set here so httpx can write the multipart
        boundary itself.
        """
        path = Path(file_path)
        with path.open("rb") as fh:
            return await self._send_request(
                "POST",
                "/upload",
                headers=self.auth_headers,
                files={"file": (path.name, fh)},
            )

    async def get_scan_logs(self, hash: str) -> Any:
        return await self._post_form("/scan_logs", hash=hash)

    async def generate_json_report(self, hash: str) -> Any:
        return await self._post_form("/report_json", hash=hash)

    async def get_recent_scans(self, page: int = 1, page_size: int = 10) -> Any:
        return await self._send_request(
            "GET",
            "/scans",
            headers=self.auth_headers,
            params={"page": page, "page_size": page_size},
        )

    async def search_scan_result(self, query: str) -> Any:
        """Search by hash, app name, package name or file name."""
        return await self._post_form("/search", query=query)

    async def delete_scan(self, hash: str) -> Any:
        return await self._post_form("/delete_scan", hash=hash)

    async def get_scorecard(self, hash: str) -> Any:
        return await self._post_form("/scorecard", hash=hash)

    async def generate_pdf_report(self, hash: str) -> bytes:
        """Download the PDF report as raw bytes."""
        return await self._send_request(
            "POST",
            "/download_pdf",
            headers={**self.form_headers, "Accept": "application/pdf"},
            data={"hash": hash},
            binary=True,
        )

    async def view_source(self, hash: str, file: str, type: str) -> Any:
        """Fetch a source file; ``type`` is one of apk/ipa/studio/eclipse/ios."""
        return await self._post_form("/view_source", hash=hash, file=file, type=type)

    async def get_scan_tasks(self) -> Any:
        """Read the async scan queue. The server must have the queue enabled."""
        return await self._send_request("POST", "/tasks", headers=self.form_headers)

    async def compare_apps(self, hash1: str, hash2: str) -> Any:
        return await self._post_form("/compare", hash1=hash1, hash2=hash2)

    async def suppress_by_rule(self, hash: str, type: str, rule: str) -> Any:
        return await self._post_form("/suppress_by_rule", hash=hash, type=type, rule=rule)

    async def suppress_by_files(self, hash: str, type: str, rule: str) -> Any:
        return await self._post_form("/suppress_by_files", hash=hash, type=type, rule=rule)

    async def list_suppressions(self, hash: str) -> Any:
        return await self._post_form("/list_suppressions", hash=hash)

    async def delete_suppression(self, hash: str, type: str, rule: str, kind: str) -> Any:
        return await self._post_form(
            "/delete_suppression", hash=hash, type=type, rule=rule, kind=kind
        )


def create_mobsf_client(base_url: str, api_key: str, timeout: float = 30) -> MobSFClient:
    return MobSFClient(base_url, api_key, timeout=timeout)
