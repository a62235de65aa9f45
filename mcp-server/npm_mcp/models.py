"""Typed payload schemas and record views for NPM resources.

Field names mirror the upstream API. Payloads are dumped with
``exclude_none`` so partial updates only send what the caller set.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Port = Annotated[int, Field(ge=1, le=65535)]
# 0 means "no certificate", "new" asks NPM to request one.
CertificateRef = Union[Annotated[int, Field(ge=0)], Literal["new"]]


class _Payload(BaseModel):
    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class _SslOptions(_Payload):
    certificate_id: Optional[CertificateRef] = None
    ssl_forced: Optional[bool] = None
    hsts_enabled: Optional[bool] = None
    hsts_subdomains: Optional[bool] = None
    http2_support: Optional[bool] = None
    advanced_config: Optional[str] = None
    meta: Optional[dict[str, Any]] = None


class ProxyHostPayload(_SslOptions):
    domain_names: list[str] = Field(description="Domain names served by this host")
    forward_scheme: Literal["http", "https"] = Field(description="Scheme used to reach the upstream")
    forward_host: str = Field(description="Upstream hostname or IP")
    forward_port: Port = Field(description="Upstream port")
    block_exploits: Optional[bool] = None
    caching_enabled: Optional[bool] = None
    allow_websocket_upgrade: Optional[bool] = None
    access_list_id: Optional[Annotated[int, Field(ge=0)]] = None
    locations: Optional[list[dict[str, Any]]] = None
    enabled: Optional[bool] = None


class ProxyHostUpdate(ProxyHostPayload):
    domain_names: Optional[list[str]] = None
    forward_scheme: Optional[Literal["http", "https"]] = None
    forward_host: Optional[str] = None
    forward_port: Optional[Port] = None


class RedirectionHostPayload(_SslOptions):
    domain_names: list[str] = Field(description="Domain names to redirect")
    forward_http_code: Annotated[int, Field(ge=300, le=308)] = Field(
        description="HTTP status code of the redirect"
    )
    forward_scheme: Literal["auto", "http", "https"] = Field(description="Scheme of the target")
    forward_domain_name: str = Field(description="Target domain name")
    preserve_path: Optional[bool] = None
    block_exploits: Optional[bool] = None
    enabled: Optional[bool] = None


class RedirectionHostUpdate(RedirectionHostPayload):
    domain_names: Optional[list[str]] = None
    forward_http_code: Optional[Annotated[int, Field(ge=300, le=308)]] = None
    forward_scheme: Optional[Literal["auto", "http", "https"]] = None
    forward_domain_name: Optional[str] = None


class DeadHostPayload(_SslOptions):
    domain_names: list[str] = Field(description="Domain names answered with a 404 page")
    enabled: Optional[bool] = None


class DeadHostUpdate(DeadHostPayload):
    domain_names: Optional[list[str]] = None


class AccessListItem(BaseModel):
    username: str
    password: str


class AccessListClient(BaseModel):
    address: str
    directive: Literal["allow", "deny"]


class AccessListPayload(_Payload):
    name: str
    satisfy_any: Optional[bool] = None
    pass_auth: Optional[bool] = None
    items: Optional[list[AccessListItem]] = None
    clients: Optional[list[AccessListClient]] = None


class AccessListUpdate(AccessListPayload):
    name: Optional[str] = None


class CertificateMeta(BaseModel):
    letsencrypt_email: Optional[str] = None
    letsencrypt_agree: Optional[bool] = None
    dns_challenge: Optional[bool] = None
    dns_provider: Optional[str] = None
    dns_provider_credentials: Optional[str] = None


class CertificatePayload(_Payload):
    provider: Literal["letsencrypt", "other"]
    domain_names: list[str]
    nice_name: Optional[str] = None
    meta: Optional[CertificateMeta] = None


# kind -> (create schema, update schema)
PAYLOAD_MODELS: dict[str, tuple[type[_Payload], Optional[type[_Payload]]]] = {
    "proxy-host": (ProxyHostPayload, ProxyHostUpdate),
    "redirection-host": (RedirectionHostPayload, RedirectionHostUpdate),
    "dead-host": (DeadHostPayload, DeadHostUpdate),
    "access-list": (AccessListPayload, AccessListUpdate),
    "certificate": (CertificatePayload, None),
}


class ResourceRecord(BaseModel):
    """The fields this package relies on in an upstream record.

    Everything else the API returns is kept as extra data.
    """

    model_config = ConfigDict(extra="allow")

    id: int
    enabled: Optional[bool] = None
    domain_names: list[str] = Field(default_factory=list)

    def describe(self, label: str) -> str:
        names = ", ".join(self.domain_names)
        return f"{label} {self.id}" + (f" ({names})" if names else "")
