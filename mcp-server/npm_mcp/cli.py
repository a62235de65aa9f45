#!/usr/bin/env python3
"""Command-line interface for Nginx Proxy Manager.

Examples:
    npm-cli config --url http://192.168.1.10:81/api --email admin@example.com --password changeme
    npm-cli auth
    npm-cli proxy list --expand owner,certificate
    npm-cli dead create --data '{"domain_names": ["old.example.com"], "ssl_forced": true}'

Exit codes:
- 0: success, JSON result on stdout
- 1: failure, {"error": message} on stderr
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from npm_mcp.client import Gateway
from npm_mcp.config import BASE_URL, CONFIG_FILE, DEBUG, SESSION_FILE, configure_logging
from npm_mcp.endpoints import (
    RESOURCES,
    ROUTES,
    dispatch,
    get_audit_log,
    get_hosts_report,
    requires_id,
)
from npm_mcp.errors import AuthError, GatewayError, UnsupportedOperation, describe_error
from npm_mcp.models import PAYLOAD_MODELS, ResourceRecord
from npm_mcp.store import CliConfig, ConfigFile, FileSessionStore, SessionStore

logger = logging.getLogger("npm_mcp.cli")

# subcommand group -> resource kind
GROUPS = {
    "proxy": "proxy-host",
    "redirection": "redirection-host",
    "dead": "dead-host",
    "access": "access-list",
    "cert": "certificate",
}


def _json_arg(value: str) -> dict:
    try:
        data = json.loads(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise argparse.ArgumentTypeError("JSON payload must be an object")
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="npm-cli", description="CLI for Nginx Proxy Manager")
    parser.add_argument("--base-url", default="", help="API URL, e.g. http://localhost:81/api")
    parser.add_argument("--config", default=str(CONFIG_FILE), help="connection settings file")
    parser.add_argument("--session", default=str(SESSION_FILE), help="session token file")
    parser.add_argument("--debug", action="store_true", help="log requests to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    config = sub.add_parser("config", help="save connection settings")
    config.add_argument("-u", "--url", dest="save_url", help="NPM API URL")
    config.add_argument("-e", "--email", help="login email")
    config.add_argument("-p", "--password", help="login password")

    auth = sub.add_parser("auth", help="authenticate and save the session")
    auth.add_argument("-e", "--email", help="login email")
    auth.add_argument("-p", "--password", help="login password")

    sub.add_parser("auth-status", help="show the saved session")
    sub.add_parser("logout", help="discard the saved session")

    for group, kind_name in GROUPS.items():
        kind = RESOURCES[kind_name]
        group_parser = sub.add_parser(group, help=f"manage {kind.label.lower()}s")
        ops = group_parser.add_subparsers(dest="operation", required=True)
        for operation in ROUTES:
            if not kind.supports(operation):
                continue
            op_parser = ops.add_parser(operation, help=f"{operation} {kind.label.lower()}")
            if requires_id(operation):
                op_parser.add_argument("id", type=int)
            if operation == "list":
                op_parser.add_argument(
                    "--expand", default="", help=f"expand fields ({','.join(kind.expand_fields)})"
                )
            if operation in ("create", "update"):
                op_parser.add_argument("--data", type=_json_arg, required=True, help="JSON object")

    sub.add_parser("report", help="get the hosts report")
    sub.add_parser("audit", help="get the audit log")
    return parser


def validate_payload(kind_name: str, operation: str, data: dict) -> dict:
    create_model, update_model = PAYLOAD_MODELS[kind_name]
    model = create_model if operation == "create" else update_model
    if model is None:
        raise UnsupportedOperation(f"{RESOURCES[kind_name].label} does not support '{operation}'")
    return model.model_validate(data).to_payload()


def open_gateway(base_url: str, store: SessionStore) -> Gateway:
    gateway = Gateway(base_url)
    session = store.load()
    if session is not None and not gateway.restore(session):
        logger.debug("Saved session is expired or for another server; discarding it")
        store.clear()
    return gateway


async def ensure_session(gateway: Gateway, config: CliConfig, store: SessionStore) -> None:
    if gateway.is_authenticated() or not config.has_credentials:
        return
    try:
        store.save(await gateway.authenticate(config.identity, config.secret))
    except AuthError as exc:
        logger.warning("Auto-authentication failed: %s", exc)


def _log_record(label: str, operation: str, result: Any) -> None:
    # Logging only; an unexpected record shape never fails the command.
    try:
        record = ResourceRecord.model_validate(result)
    except ValidationError:
        logger.info("%s %sd", label, operation)
        return
    logger.info("%s %sd", record.describe(label), operation)


async def run_resource_command(gateway: Gateway, args: argparse.Namespace) -> Any:
    kind_name = GROUPS[args.command]
    kind = RESOURCES[kind_name]
    operation = args.operation
    resource_id = getattr(args, "id", None)

    if operation in ("create", "update"):
        payload = validate_payload(kind_name, operation, args.data)
        result = await dispatch(gateway, kind_name, operation, resource_id, payload=payload)
        _log_record(kind.label, operation, result)
        return result

    if operation in ("delete", "enable", "disable"):
        await dispatch(gateway, kind_name, operation, resource_id)
        return {"success": True, "message": f"{kind.label} {resource_id} {operation}d successfully"}

    expand = getattr(args, "expand", "") or None
    return await dispatch(gateway, kind_name, operation, resource_id, expand=expand)


async def run(args: argparse.Namespace, config_file: ConfigFile, store: SessionStore) -> Any:
    config = config_file.load()

    if args.command == "config":
        if args.save_url:
            config.base_url = args.save_url
        if args.email and args.password:
            config.identity, config.secret = args.email, args.password
        config_file.save(config)
        return {"message": "Configuration saved", "path": str(config_file.path)}

    gateway = open_gateway(args.base_url or config.base_url or BASE_URL, store)

    if args.command == "auth":
        identity = args.email or config.identity
        secret = args.password or config.secret
        if not identity or not secret:
            raise ValueError("Email and password required")
        store.save(await gateway.authenticate(identity, secret))
        return gateway.auth_status()
    if args.command == "auth-status":
        return gateway.auth_status()
    if args.command == "logout":
        gateway.logout()
        store.clear()
        return gateway.auth_status()

    await ensure_session(gateway, config, store)
    if args.command == "report":
        return await get_hosts_report(gateway)
    if args.command == "audit":
        return await get_audit_log(gateway)
    return await run_resource_command(gateway, args)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.debug or DEBUG)

    try:
        result = asyncio.run(
            run(args, ConfigFile(Path(args.config)), FileSessionStore(Path(args.session)))
        )
    except (GatewayError, UnsupportedOperation, OSError, ValueError) as exc:
        print(json.dumps({"error": describe_error(exc)}), file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
