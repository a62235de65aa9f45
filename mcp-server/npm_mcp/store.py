"""Persistence for CLI sessions and connection settings."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from npm_mcp.client import Session

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    def load(self) -> Session | None: ...

    def save(self, session: Session) -> None: ...

    def clear(self) -> None: ...


class MemorySessionStore:
    def __init__(self, session: Session | None = None):
        self.session = session

    def load(self) -> Session | None:
        return self.session

    def save(self, session: Session) -> None:
        self.session = session

    def clear(self) -> None:
        self.session = None


def _write_private(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2))
    os.chmod(path, 0o600)


class FileSessionStore:
    """Keeps the current session in a JSON file between CLI invocations."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Session | None:
        if not self.path.exists():
            return None
        try:
            return Session.from_dict(json.loads(self.path.read_text()))
        except (OSError, ValueError, TypeError) as exc:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, exc)
            return None

    def save(self, session: Session) -> None:
        _write_private(self.path, session.to_dict())

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


@dataclass
class CliConfig:
    base_url: str | None = None
    identity: str | None = None
    secret: str | None = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.identity and self.secret)


class ConfigFile:
    """Connection settings saved by ``npm-cli config``."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> CliConfig:
        if not self.path.exists():
            return CliConfig()
        data = json.loads(self.path.read_text())
        credentials = data.get("credentials") or {}
        return CliConfig(
            base_url=data.get("base_url"),
            identity=credentials.get("identity"),
            secret=credentials.get("secret"),
        )

    def save(self, config: CliConfig) -> None:
        data: dict[str, Any] = {}
        if config.base_url:
            data["base_url"] = config.base_url
        if config.has_credentials:
            data["credentials"] = {"identity": config.identity, "secret": config.secret}
        _write_private(self.path, data)
