"""Session-aware async HTTP gateway for the Nginx Proxy Manager API."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import httpx

from npm_mcp.config import BASE_URL, REQUEST_TIMEOUT, TOKEN_TTL_SECONDS
from npm_mcp.errors import AuthError, NetworkError, NotAuthenticated, UpstreamError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp (e.g. a token's ``expires``) or return None."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class Session:
    """A bearer token and the window in which it may be attached."""

    token: str
    issued_at: datetime
    expires_at: datetime
    base_url: str

    def is_valid(self, now: datetime) -> bool:
        return bool(self.token) and now < self.expires_at

    def to_dict(self) -> dict[str, str]:
        return {
            "token": self.token,
            "issued_at": self.issued_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
            "base_url": self.base_url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Session":
        issued_at = parse_timestamp(data.get("issued_at"))
        expires_at = parse_timestamp(data.get("expires_at"))
        if not data.get("token") or issued_at is None or expires_at is None:
            raise ValueError("incomplete session record")
        return cls(
            token=data["token"],
            issued_at=issued_at,
            expires_at=expires_at,
            base_url=data.get("base_url", ""),
        )


def _decode(resp: httpx.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text


def _error_message(resp: httpx.Response) -> tuple[Any, str]:
    """Pull the upstream error message out of a failed response.

    NPM answers ``{"error": {"code": 400, "message": "..."}}``; older
    releases and proxies in front of it use a top-level ``message``.
    """
    body = _decode(resp)
    message = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            message = error.get("message")
        elif isinstance(error, str):
            message = error
        message = message or body.get("message")
    if not message:
        message = f"HTTP {resp.status_code} {resp.reason_phrase}".strip()
    return body, str(message)


class Gateway:
    """Holds one time-bounded session and forwards requests with it.

    Every forwarding call goes through :meth:`request`, which refuses to
    dispatch without a locally valid token and translates upstream failures
    into :mod:`npm_mcp.errors` exceptions.

    Args:
        base_url: API root, e.g. ``http://localhost:81/api``.
        timeout: Per-request timeout in seconds.
        token_ttl: Fallback token lifetime when the server declares none.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
        clock: Returns the current aware UTC time.
    """

    def __init__(
        self,
        base_url: str = BASE_URL,
        *,
        timeout: float = REQUEST_TIMEOUT,
        token_ttl: int = TOKEN_TTL_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token_ttl = token_ttl
        self._transport = transport
        self._clock = clock
        self.session: Session | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    def update_base_url(self, base_url: str, keep_session: bool = True) -> None:
        """Point future requests at another backend.

        Requests already in flight keep the address they started with. The
        current session survives unless ``keep_session`` is False.
        """
        self._base_url = base_url.rstrip("/")
        if not keep_session:
            self.session = None
        logger.info("Base URL set to %s", self._base_url)

    def _client(self, headers: dict[str, str] | None = None) -> httpx.AsyncClient:
        merged = {"Content-Type": "application/json"}
        if headers:
            merged.update(headers)
        kwargs: dict[str, Any] = {}
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=merged,
            timeout=self.timeout,
            **kwargs,
        )

    # Session lifecycle

    def is_authenticated(self) -> bool:
        return self.session is not None and self.session.is_valid(self._clock())

    async def authenticate(self, identity: str, secret: str) -> Session:
        """Exchange credentials for a bearer token.

        Any failure clears the existing session before raising AuthError.
        """
        try:
            async with self._client() as client:
                resp = await client.post(
                    "/tokens",
                    json={"identity": identity, "secret": secret, "scope": "user"},
                )
        except httpx.RequestError as exc:
            self.session = None
            logger.warning("Authentication request failed: %s", exc)
            raise AuthError(f"Authentication failed: {exc}", cause=exc) from exc

        logger.debug("POST /tokens -> %s", resp.status_code)
        if not resp.is_success:
            self.session = None
            body, message = _error_message(resp)
            cause = UpstreamError(resp.status_code, message, body)
            raise AuthError(f"Authentication failed: {message}", cause=cause)

        data = _decode(resp)
        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            self.session = None
            raise AuthError("Authentication failed: token missing from response")

        now = self._clock()
        expires_at = parse_timestamp(data.get("expires"))
        if expires_at is None:
            expires_at = now + timedelta(seconds=self.token_ttl)
        self.session = Session(
            token=token, issued_at=now, expires_at=expires_at, base_url=self._base_url
        )
        logger.info("Authenticated as %s; token expires at %s", identity, expires_at.isoformat())
        return self.session

    def restore(self, session: Session) -> bool:
        """Adopt a persisted session if it is still valid for this base URL."""
        if session.base_url != self._base_url or not session.is_valid(self._clock()):
            return False
        self.session = session
        return True

    def logout(self) -> None:
        self.session = None

    def auth_status(self) -> dict[str, Any]:
        if not self.is_authenticated():
            return {"authenticated": False, "base_url": self._base_url}
        return {
            "authenticated": True,
            "expires_at": self.session.expires_at.isoformat(),
            "base_url": self._base_url,
        }

    # Forwarding

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        if not self.is_authenticated():
            raise NotAuthenticated()
        headers = {"Authorization": f"Bearer {self.session.token}"}
        try:
            async with self._client(headers) as client:
                resp = await client.request(method, path, json=json, params=params)
        except httpx.TimeoutException as exc:
            raise NetworkError(f"Request timed out: {method} {path}", cause=exc) from exc
        except httpx.RequestError as exc:
            raise NetworkError(f"Request failed: {exc}", cause=exc) from exc

        logger.debug("%s %s -> %s", method, path, resp.status_code)
        if not resp.is_success:
            body, message = _error_message(resp)
            raise UpstreamError(resp.status_code, message, body)
        return _decode(resp)

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("DELETE", path, params=params)
