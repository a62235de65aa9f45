"""Resource tools generated from the endpoint table.

One set of list/get/create/update/delete/enable/disable/renew tools is
registered per resource kind, limited to the operations the kind supports.
"""

from npm_mcp.client import Gateway
from npm_mcp.endpoints import RESOURCES, ResourceKind, dispatch
from npm_mcp.models import PAYLOAD_MODELS
from npm_mcp.tools.common import forward, to_text


async def _acknowledge(call, message: str) -> str:
    # delete/enable/disable answer a bare `true`
    await forward(call)
    return to_text({"success": True, "message": message})


def _register_kind(mcp, gateway: Gateway, kind: ResourceKind):
    create_model, update_model = PAYLOAD_MODELS[kind.name]
    slug = kind.slug
    label = kind.label
    plural = f"{label}s"

    if kind.supports("list"):
        async def list_resources(expand: str = "") -> str:
            return await forward(dispatch(gateway, kind.name, "list", expand=expand or None))

        mcp.tool(
            name=f"npm_list_{slug}s",
            description=(
                f"List all {plural.lower()}. "
                f"expand: comma-separated relations ({', '.join(kind.expand_fields)})."
            ),
        )(list_resources)

    if kind.supports("get"):
        async def get_resource(id: int) -> str:
            return await forward(dispatch(gateway, kind.name, "get", id))

        mcp.tool(name=f"npm_get_{slug}", description=f"Get a {label.lower()} by ID.")(get_resource)

    if kind.supports("create"):
        async def create_resource(data: create_model) -> str:
            return await forward(dispatch(gateway, kind.name, "create", payload=data.to_payload()))

        mcp.tool(name=f"npm_create_{slug}", description=f"Create a new {label.lower()}.")(
            create_resource
        )

    if kind.supports("update") and update_model is not None:
        async def update_resource(id: int, data: update_model) -> str:
            return await forward(
                dispatch(gateway, kind.name, "update", id, payload=data.to_payload())
            )

        mcp.tool(
            name=f"npm_update_{slug}",
            description=f"Update an existing {label.lower()}. Only provided fields are sent.",
        )(update_resource)

    if kind.supports("delete"):
        async def delete_resource(id: int) -> str:
            return await _acknowledge(
                dispatch(gateway, kind.name, "delete", id), f"{label} {id} deleted successfully"
            )

        mcp.tool(name=f"npm_delete_{slug}", description=f"Delete a {label.lower()}.")(
            delete_resource
        )

    if kind.supports("enable"):
        async def enable_resource(id: int) -> str:
            return await _acknowledge(
                dispatch(gateway, kind.name, "enable", id), f"{label} {id} enabled successfully"
            )

        mcp.tool(name=f"npm_enable_{slug}", description=f"Enable a {label.lower()}.")(
            enable_resource
        )

    if kind.supports("disable"):
        async def disable_resource(id: int) -> str:
            return await _acknowledge(
                dispatch(gateway, kind.name, "disable", id), f"{label} {id} disabled successfully"
            )

        mcp.tool(name=f"npm_disable_{slug}", description=f"Disable a {label.lower()}.")(
            disable_resource
        )

    if kind.supports("renew"):
        async def renew_resource(id: int) -> str:
            return await forward(dispatch(gateway, kind.name, "renew", id))

        mcp.tool(name=f"npm_renew_{slug}", description=f"Renew a {label.lower()}.")(
            renew_resource
        )


def register_tools(mcp, gateway: Gateway):
    for kind in RESOURCES.values():
        _register_kind(mcp, gateway, kind)
