"""Authentication and connection tools."""

from fastmcp.exceptions import ToolError

from npm_mcp.client import Gateway
from npm_mcp.errors import AuthError
from npm_mcp.tools.common import to_text


def register_tools(mcp, gateway: Gateway):
    @mcp.tool()
    async def npm_authenticate(identity: str, secret: str) -> str:
        """Authenticate with Nginx Proxy Manager.

        Args:
            identity: Login email of an NPM user.
            secret: Password for that user.
        """
        try:
            await gateway.authenticate(identity, secret)
        except AuthError as exc:
            raise ToolError(str(exc)) from exc
        return to_text(gateway.auth_status())

    @mcp.tool()
    async def npm_auth_status() -> str:
        """Report whether a valid session exists and when it expires."""
        return to_text(gateway.auth_status())

    @mcp.tool()
    async def npm_logout() -> str:
        """Discard the current session token."""
        gateway.logout()
        return to_text(gateway.auth_status())

    @mcp.tool()
    async def npm_set_base_url(base_url: str, keep_session: bool = True) -> str:
        """Point the server at another Nginx Proxy Manager API.

        The base URL includes the /api suffix, e.g. http://192.168.1.10:81/api.
        Set keep_session to false to drop the current token as well.
        """
        gateway.update_base_url(base_url, keep_session=keep_session)
        return to_text(gateway.auth_status())
