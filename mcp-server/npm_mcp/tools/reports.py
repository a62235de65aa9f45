"""Report and audit log tools."""

from npm_mcp.client import Gateway
from npm_mcp.endpoints import get_audit_log, get_hosts_report
from npm_mcp.tools.common import forward


def register_tools(mcp, gateway: Gateway):
    @mcp.tool()
    async def npm_get_hosts_report() -> str:
        """Get host counts per type (proxy, redirection, stream, 404)."""
        return await forward(get_hosts_report(gateway))

    @mcp.tool()
    async def npm_get_audit_log() -> str:
        """Get the audit log of changes made through Nginx Proxy Manager."""
        return await forward(get_audit_log(gateway))
