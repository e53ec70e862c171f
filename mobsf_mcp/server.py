import asyncio
import base64
import json
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import Annotated, Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from mcp.types import BlobResourceContents, EmbeddedResource
from pydantic import Field

from . import __version__
from .clients import MobSFClient, create_mobsf_client
from .config import Settings
from .exceptions import ConfigurationError, MobSFAPIError
from .logging_config import configure_logging, configure_tool_logging, get_tool_logger
from .sections import JSON_SECTIONS

logger = logging.getLogger("mobsf_mcp")
tool_logger = get_tool_logger()

mcp: FastMCP = FastMCP("mobsf", version=__version__)

# Built lazily from the environment, or eagerly by main()
mobsf_client: MobSFClient | None = None

ScanHash = Annotated[str, Field(description="Hash of the scan")]
PageNumber = Annotated[int, Field(description="Page number for result")]
PageSize = Annotated[int, Field(description="Page size for result")]


def _get_client() -> MobSFClient:
    """Return the shared MobSF client, creating it from the environment on first use."""
    global mobsf_client
    if mobsf_client is None:
        settings = Settings.from_env()
        mobsf_client = create_mobsf_client(
            settings.mobsf_url, settings.api_key, timeout=settings.timeout
        )
    return mobsf_client


async def _call_backend(
    tool: str, operation: Callable[[MobSFClient], Awaitable[Any]]
) -> Any:
    """Run one backend call, turning MobSF failures into tool errors."""
    client = _get_client()
    try:
        result = await operation(client)
    except MobSFAPIError as e:
        tool_logger.warning(
            f"{tool} failed",
            extra={"event": "tool_call", "tool": tool, "status": "error", "error": str(e)},
        )
        raise ToolError(str(e)) from e

    tool_logger.info(
        f"{tool} succeeded",
        extra={"event": "tool_call", "tool": tool, "status": "ok"},
    )
    return result


def _as_json(result: Any) -> str:
    """Serialize a backend result as indented JSON, strings included."""
    return json.dumps(result, indent=2, ensure_ascii=False)


def _as_text(result: Any) -> str:
    """Pass strings through unchanged and serialize everything else."""
    if isinstance(result, str):
        return result
    return _as_json(result)


def _decode_json(tool: str, result: Any, what: str) -> Any:
    """Parse a result MobSF delivered as a JSON string; other values pass through."""
    if not isinstance(result, str):
        return result
    try:
        return json.loads(result)
    except json.JSONDecodeError as e:
        raise ToolError(f"{tool}: MobSF returned {what} that is not valid JSON: {e}") from e


def _parse_report(tool: str, result: Any) -> dict[str, Any]:
    result = _decode_json(tool, result, "a report")
    if not isinstance(result, dict):
        raise ToolError(f"{tool}: expected a JSON object report, got {type(result).__name__}")
    return result


async def _fetch_report(tool: str, hash: str) -> dict[str, Any]:
    result = await _call_backend(tool, lambda c: c.generate_json_report(hash))
    return _parse_report(tool, result)


# =============================================================================
# Scan lifecycle
# =============================================================================

@mcp.tool(name="uploadFile")
async def upload_file(
    file: Annotated[str, Field(description="Upload file path")],
) -> str:
    """Upload a mobile application file (APK, IPA, or APPX) to MobSF for security analysis. This is the first step before scanning and must be done prior to using other analysis functions."""
    logger.info(f"Uploading {file}")
    result = await _call_backend("uploadFile", lambda c: c.upload_file(file))
    return _as_json(result)


@mcp.tool(name="getScanLogs")
async def get_scan_logs(
    hash: Annotated[str, Field(description="Hash file to getting scan logs")],
) -> str:
    """Retrieve detailed scan logs for a previously analyzed mobile application using its hash value. These logs contain information about the scanning process and any issues encountered."""
    result = await _call_backend("getScanLogs", lambda c: c.get_scan_logs(hash))
    return _as_json(result)


@mcp.tool(name="getRecentScans")
async def get_recent_scans(page: PageNumber, pageSize: PageSize) -> str:
    """Retrieve a list of recently performed security scans on the MobSF server, showing mobile applications that have been analyzed, their statuses, and basic scan information."""
    result = await _call_backend(
        "getRecentScans", lambda c: c.get_recent_scans(page, pageSize)
    )
    return _as_json(result)


@mcp.tool(name="searchScanResult")
async def search_scan_result(
    query: Annotated[
        str, Field(description="Hash, app name, package name, or file name to search")
    ],
) -> str:
    """Search scan results by hash, app name, package name, or file name."""
    result = await _call_backend("searchScanResult", lambda c: c.search_scan_result(query))
    return _as_json(result)


@mcp.tool(name="deleteScan")
async def delete_scan(
    hash: Annotated[str, Field(description="Hash of the scan to delete")],
) -> str:
    """Delete scan results by hash."""
    logger.info(f"Deleting scan {hash}")
    result = await _call_backend("deleteScan", lambda c: c.delete_scan(hash))
    return _as_json(result)


@mcp.tool(name="getScanTasks")
async def get_scan_tasks() -> str:
    """Get scan tasks queue (async scan queue must be enabled)."""
    result = await _call_backend("getScanTasks", lambda c: c.get_scan_tasks())
    return _as_text(result)


@mcp.tool(name="listAllHashes")
async def list_all_hashes(page: PageNumber, pageSize: PageSize) -> str:
    """Get all report MD5 hash values."""
    result = await _call_backend(
        "listAllHashes", lambda c: c.get_recent_scans(page, pageSize)
    )
    data = _decode_json("listAllHashes", result, "a scan list")
    content = data.get("content") if isinstance(data, dict) else None
    hashes = [item.get("MD5") if isinstance(item, dict) else None for item in content or []]
    return _as_json(hashes)


# =============================================================================
# Reports
# =============================================================================

@mcp.tool(name="getJsonReport")
async def get_json_report(
    hash: Annotated[str, Field(description="Hash file to getting scan logs")],
) -> str:
    """Generate and retrieve a comprehensive security analysis report in JSON format for a scanned mobile application. This report includes detailed findings about security vulnerabilities, permissions, API calls, and other security-relevant information."""
    result = await _call_backend("getJsonReport", lambda c: c.generate_json_report(hash))
    return _as_json(result)


@mcp.tool(name="getJsonReportSection")
async def get_json_report_section(
    hash: ScanHash,
    section: Annotated[
        str,
        Field(
            description="Section name, e.g. permissions, android_api, security_analysis, etc."
        ),
    ],
) -> str:
    """Get a specific section of the MobSF JSON report by hash and section name."""
    report = await _fetch_report("getJsonReportSection", hash)
    if section not in report:
        return f"Section '{section}' not found in report."
    return _as_json(report[section])


@mcp.tool(name="getJsonReportSections")
async def get_json_report_sections(hash: ScanHash) -> str:
    """Get all top-level section names of the MobSF JSON report."""
    report = await _fetch_report("getJsonReportSections", hash)
    return _as_json(list(report.keys()))


@mcp.tool(name="getScorecard")
async def get_scorecard(
    hash: Annotated[str, Field(description="Hash of the scan to get scorecard")],
) -> str:
    """Get MobSF Application Security Scorecard by hash."""
    result = await _call_backend("getScorecard", lambda c: c.get_scorecard(hash))
    return _as_json(result)


@mcp.tool(name="generatePdfReport")
async def generate_pdf_report(
    hash: Annotated[str, Field(description="Hash of the scan to generate PDF report")],
) -> EmbeddedResource:
    """Generate PDF security report by hash. Returns PDF as base64 string."""
    pdf = await _call_backend("generatePdfReport", lambda c: c.generate_pdf_report(hash))
    return EmbeddedResource(
        type="resource",
        resource=BlobResourceContents(
            uri=f"mobsf://reports/mobsf_report_{hash}.pdf",
            blob=base64.b64encode(pdf).decode("ascii"),
            mimeType="application/pdf",
        ),
    )


@mcp.tool(name="viewSource")
async def view_source(
    hash: ScanHash,
    file: Annotated[str, Field(description="Relative file path")],
    type: Annotated[str, Field(description="File type (apk/ipa/studio/eclipse/ios)")],
) -> str:
    """View source files by hash, file path, and type."""
    result = await _call_backend("viewSource", lambda c: c.view_source(hash, file, type))
    return _as_text(result)


@mcp.tool(name="compareApps")
async def compare_apps(
    hash1: Annotated[str, Field(description="First scan hash")],
    hash2: Annotated[str, Field(description="Second scan hash to compare with")],
) -> str:
    """Compare scan results by two hashes."""
    result = await _call_backend("compareApps", lambda c: c.compare_apps(hash1, hash2))
    return _as_text(result)


# =============================================================================
# Suppressions
# =============================================================================

@mcp.tool(name="suppressByRule")
async def suppress_by_rule(
    hash: ScanHash,
    type: Annotated[str, Field(description="code or manifest")],
    rule: Annotated[str, Field(description="Rule id")],
) -> str:
    """Suppress findings by rule id."""
    result = await _call_backend(
        "suppressByRule", lambda c: c.suppress_by_rule(hash, type, rule)
    )
    return _as_text(result)


@mcp.tool(name="suppressByFiles")
async def suppress_by_files(
    hash: ScanHash,
    type: Annotated[str, Field(description="code")],
    rule: Annotated[str, Field(description="Rule id")],
) -> str:
    """Suppress findings by files."""
    result = await _call_backend(
        "suppressByFiles", lambda c: c.suppress_by_files(hash, type, rule)
    )
    return _as_text(result)


@mcp.tool(name="listSuppressions")
async def list_suppressions(hash: ScanHash) -> str:
    """View suppressions associated with a scan."""
    result = await _call_backend("listSuppressions", lambda c: c.list_suppressions(hash))
    return _as_text(result)


@mcp.tool(name="deleteSuppression")
async def delete_suppression(
    hash: ScanHash,
    type: Annotated[str, Field(description="code or manifest")],
    rule: Annotated[str, Field(description="Rule id")],
    kind: Annotated[str, Field(description="rule or file")],
) -> str:
    """Delete suppressions."""
    result = await _call_backend(
        "deleteSuppression", lambda c: c.delete_suppression(hash, type, rule, kind)
    )
    return _as_text(result)


# =============================================================================
# Per-section shortcuts
# =============================================================================

def _register_section_tool(section: str) -> None:
    tool_name = f"getJsonSection_{section}"

    # Unlike getJsonReportSection, an absent section serializes as null
    async def get_section(hash: ScanHash) -> str:
        report = await _fetch_report(tool_name, hash)
        return _as_json(report.get(section))

    mcp.tool(
        name=tool_name,
        description=f"Get the '{section}' section of the MobSF JSON report by hash.",
    )(get_section)


for _section in JSON_SECTIONS:
    _register_section_tool(_section)


def main() -> None:
    """Run the MCP server over stdio."""
    global mobsf_client

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    configure_logging(settings.log_level)
    configure_tool_logging(settings.log_file, settings.log_level)

    mobsf_client = create_mobsf_client(
        settings.mobsf_url, settings.api_key, timeout=settings.timeout
    )
    logger.info(f"Using MobSF at {mobsf_client.base_url}")

    print("MobSF MCP Server running on stdio", file=sys.stderr)

    try:
        asyncio.run(mcp.run_async(transport="stdio"))
    except KeyboardInterrupt:
        print("\nShutting down...", file=sys.stderr)
        sys.exit(0)
    except Exception as e:
        print(f"Fatal error in main(): {e}", file=sys.stderr)
        import traceback

        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
