"""Nginx Proxy Manager MCP Server -- manage hosts, access lists and certificates."""

from fastmcp import FastMCP

from npm_mcp.client import Gateway
from npm_mcp.config import configure_logging

INSTRUCTIONS = (
    "MCP server for managing an Nginx Proxy Manager instance. "
    "Provides tools for proxy hosts, redirection hosts, 404 hosts, "
    "access lists, certificates, the hosts report and the audit log. "
    "Call npm_authenticate first; when a tool reports that the session "
    "is missing or expired, authenticate again. "
    "Set NPM_BASE_URL before connecting, or use npm_set_base_url."
)

from npm_mcp.tools.auth import register_tools as register_auth_tools
from npm_mcp.tools.resources import register_tools as register_resource_tools
from npm_mcp.tools.reports import register_tools as register_report_tools


def create_server(gateway: Gateway | None = None) -> FastMCP:
    """Build the MCP server around one gateway instance."""
    gateway = gateway if gateway is not None else Gateway()
    mcp = FastMCP("Nginx Proxy Manager", instructions=INSTRUCTIONS)

    register_auth_tools(mcp, gateway)      # 4 tools
    register_resource_tools(mcp, gateway)  # 31 tools
    register_report_tools(mcp, gateway)    # 2 tools
    # Total: 37 tools
    return mcp


def main():
    configure_logging()
    create_server().run()


if __name__ == "__main__":
    main()
