"""Environment configuration for the Nginx Proxy Manager MCP server."""

import logging
import os
import sys
import tempfile
from pathlib import Path

def env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment, else ``default``."""
    raw = os.environ.get(name, "").strip()
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


BASE_URL = os.environ.get("NPM_BASE_URL", "http://localhost:81/api")
DEBUG = os.environ.get("NPM_DEBUG", "").strip().lower() in ("1", "true", "yes", "on")

# Upstream tokens do not always declare an expiry; fall back to this window.
TOKEN_TTL_SECONDS = env_int("NPM_TOKEN_TTL", 3600)
REQUEST_TIMEOUT = 30.0

CONFIG_FILE = Path(
    os.environ.get("NPM_CLI_CONFIG", str(Path.home() / ".npm-cli-config.json"))
)
SESSION_FILE = Path(
    os.environ.get("NPM_SESSION_FILE", str(Path(tempfile.gettempdir()) / ".npm-session.json"))
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(debug: bool = DEBUG) -> None:
    """Send log records to stderr; stdout is reserved for MCP and CLI output."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    # httpx logs every request at INFO, which duplicates the gateway's own line.
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)
