"""MCP server exposing the MobSF mobile security scanner as tools."""

__version__ = "1.1.2"
