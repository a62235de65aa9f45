"""Shared result and error shaping for tool handlers."""

import json
import logging
from typing import Any, Awaitable

from fastmcp.exceptions import ToolError

from npm_mcp.errors import GatewayError, UnsupportedOperation, describe_error

logger = logging.getLogger(__name__)


def to_text(result: Any) -> str:
    return json.dumps(result, indent=2, default=str)


async def forward(call: Awaitable[Any]) -> str:
    """Await one gateway call and return its JSON text.

    Gateway failures become ToolError so the client receives a
    protocol-level error result instead of a payload.
    """
    try:
        result = await call
    except (GatewayError, UnsupportedOperation) as exc:
        logger.warning("Tool call failed: %s", exc)
        raise ToolError(describe_error(exc)) from exc
    return to_text(result)
