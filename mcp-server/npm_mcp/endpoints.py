"""Declarative endpoint table for the NPM resource kinds.

Each resource kind maps to a base path, the operations the upstream API
supports for it, and the boolean fields it expects as 0/1. ``dispatch``
turns ``(kind, operation, id, payload)`` into exactly one gateway request.
"""

from dataclasses import dataclass, field
from typing import Any

from npm_mcp.client import Gateway
from npm_mcp.errors import UnsupportedOperation

HOST_OPERATIONS = frozenset(
    {"list", "get", "create", "update", "delete", "enable", "disable"}
)

# operation -> (HTTP method, path suffix after the id, needs id)
ROUTES: dict[str, tuple[str, str | None, bool]] = {
    "list": ("GET", None, False),
    "create": ("POST", None, False),
    "get": ("GET", "", True),
    "update": ("PUT", "", True),
    "delete": ("DELETE", "", True),
    "enable": ("POST", "/enable", True),
    "disable": ("POST", "/disable", True),
    "renew": ("POST", "/renew", True),
}


@dataclass(frozen=True)
class ResourceKind:
    name: str
    base_path: str
    label: str
    operations: frozenset[str]
    numeric_flags: tuple[str, ...] = field(default=())
    expand_fields: tuple[str, ...] = field(default=())

    @property
    def slug(self) -> str:
        """Identifier form used in tool names, e.g. ``proxy_host``."""
        return self.name.replace("-", "_")

    def supports(self, operation: str) -> bool:
        return operation in self.operations

    def coerce(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Return a copy with this kind's boolean flags sent as 0/1."""
        data = dict(payload)
        for key in self.numeric_flags:
            if isinstance(data.get(key), bool):
                data[key] = int(data[key])
        return data


RESOURCES: dict[str, ResourceKind] = {
    kind.name: kind
    for kind in (
        ResourceKind(
            "proxy-host",
            "/nginx/proxy-hosts",
            "Proxy host",
            HOST_OPERATIONS,
            expand_fields=("owner", "certificate", "access_list"),
        ),
        ResourceKind(
            "redirection-host",
            "/nginx/redirection-hosts",
            "Redirection host",
            HOST_OPERATIONS,
            expand_fields=("owner", "certificate"),
        ),
        ResourceKind(
            "dead-host",
            "/nginx/dead-hosts",
            "404 host",
            HOST_OPERATIONS,
            numeric_flags=("ssl_forced", "hsts_enabled", "hsts_subdomains", "http2_support"),
            expand_fields=("owner", "certificate"),
        ),
        ResourceKind(
            "access-list",
            "/nginx/access-lists",
            "Access list",
            frozenset({"list", "get", "create", "update", "delete"}),
            expand_fields=("owner", "items", "clients", "proxy_hosts"),
        ),
        ResourceKind(
            "certificate",
            "/nginx/certificates",
            "Certificate",
            frozenset({"list", "get", "create", "delete", "renew"}),
            expand_fields=("owner",),
        ),
    )
}


def requires_id(operation: str) -> bool:
    return ROUTES[operation][2]


HOSTS_REPORT_PATH = "/reports/hosts"
AUDIT_LOG_PATH = "/audit-log"


def resolve(kind: str, operation: str) -> ResourceKind:
    try:
        resource = RESOURCES[kind]
    except KeyError:
        raise UnsupportedOperation(f"Unknown resource kind: {kind}") from None
    if operation not in ROUTES or not resource.supports(operation):
        raise UnsupportedOperation(f"{resource.label} does not support '{operation}'")
    return resource


def build_request(
    kind: str,
    operation: str,
    resource_id: int | None = None,
    payload: dict[str, Any] | None = None,
    expand: str | None = None,
) -> tuple[str, str, Any, dict[str, Any] | None]:
    """Resolve a table entry to ``(method, path, json, params)`` without I/O."""
    resource = resolve(kind, operation)
    method, suffix, needs_id = ROUTES[operation]

    path = resource.base_path
    if needs_id:
        if resource_id is None:
            raise UnsupportedOperation(f"'{operation}' on {resource.name} requires an id")
        path = f"{path}/{resource_id}{suffix}"

    body = None
    if operation in ("create", "update"):
        body = resource.coerce(payload or {})

    params = {"expand": expand} if operation == "list" and expand else None
    return method, path, body, params


async def dispatch(
    gateway: Gateway,
    kind: str,
    operation: str,
    resource_id: int | None = None,
    payload: dict[str, Any] | None = None,
    expand: str | None = None,
) -> Any:
    method, path, body, params = build_request(kind, operation, resource_id, payload, expand)
    return await gateway.request(method, path, json=body, params=params)


async def get_hosts_report(gateway: Gateway) -> Any:
    return await gateway.get(HOSTS_REPORT_PATH)


async def get_audit_log(gateway: Gateway) -> Any:
    return await gateway.get(AUDIT_LOG_PATH)
