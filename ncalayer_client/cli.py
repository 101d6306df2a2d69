"""Command-line entry point: run one middleware operation and print the outcome.

Exit codes: 0 on success, 1 on a classified failure, 2 when the middleware is
unreachable or the connection drops mid-call.
"""

from __future__ import annotations

import sys
import asyncio
import getpass
import argparse
from dataclasses import replace
from collections.abc import Callable, Awaitable

from ncalayer_client.client import NCALayerClient
from ncalayer_client.state import FormUpdate
from ncalayer_client.config.protocol import KEY_TYPES
from ncalayer_client.runtime.logging import configure_logging
from ncalayer_client.runtime.settings_loader import load_settings
from ncalayer_client.errors import CallAbortedError, ChannelNotReadyError, MissingArgumentError

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_UNREACHABLE = 2

CommandFn = Callable[[NCALayerClient, argparse.Namespace], Awaitable[FormUpdate]]


async def _ensure_key_alias(client: NCALayerClient) -> FormUpdate | None:
    if client.form.key_alias:
        return None
    update = await client.get_keys()
    return update if update.error is not None else None


async def _cmd_browse(client: NCALayerClient, args: argparse.Namespace) -> FormUpdate:
    return await client.browse_key_store(args.alias)


async def _cmd_keys(client: NCALayerClient, args: argparse.Namespace) -> FormUpdate:
    return await client.get_keys()


async def _cmd_locale(client: NCALayerClient, args: argparse.Namespace) -> FormUpdate:
    return await client.set_locale()


async def _cmd_cert(client: NCALayerClient, args: argparse.Namespace) -> FormUpdate:
    failed = await _ensure_key_alias(client)
    if failed is not None:
        return failed
    calls = {
        "not-before": client.get_not_before,
        "not-after": client.get_not_after,
        "subject": client.get_subject_dn,
        "issuer": client.get_issuer_dn,
    }
    return await calls[args.field]()


async def _cmd_rdn(client: NCALayerClient, args: argparse.Namespace) -> FormUpdate:
    failed = await _ensure_key_alias(client)
    if failed is not None:
        return failed
    return await client.get_rdn_by_oid(args.index)


async def _cmd_sign(client: NCALayerClient, args: argparse.Namespace) -> FormUpdate:
    failed = await _ensure_key_alias(client)
    if failed is not None:
        return failed
    return await client.sign_plain_data()


async def _cmd_verify(client: NCALayerClient, args: argparse.Namespace) -> FormUpdate:
    failed = await _ensure_key_alias(client)
    if failed is not None:
        return failed
    return await client.verify_plain_data()


COMMANDS: dict[str, CommandFn] = {
    "browse": _cmd_browse,
    "keys": _cmd_keys,
    "locale": _cmd_locale,
    "cert": _cmd_cert,
    "rdn": _cmd_rdn,
    "sign": _cmd_sign,
    "verify": _cmd_verify,
}


def _add_store_args(parser: argparse.ArgumentParser, *, key_alias: bool = True) -> None:
    parser.add_argument("--alias", default="PKCS12", help="Storage alias (default: PKCS12)")
    parser.add_argument("--path", required=True, help="Key store path")
    parser.add_argument("--password", default=None, help="Key store password (prompted when omitted)")
    parser.add_argument("--key-type", default="ALL", choices=KEY_TYPES)
    if key_alias:
        parser.add_argument("--key-alias", default="", help="Key alias (first key when omitted)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ncalayer-client", description="Run one NCALayer operation.")
    parser.add_argument("--url", default=None, help="Middleware WebSocket URL")
    parser.add_argument("--log-level", default=None, help="Logging level (default: $LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    browse = sub.add_parser("browse", help="Choose a key store file")
    browse.add_argument("--alias", default="PKCS12")
    browse.add_argument("--path", default="", help="Directory to start browsing from")

    _add_store_args(sub.add_parser("keys", help="List keys in a store"), key_alias=False)

    locale = sub.add_parser("locale", help="Set the middleware UI language")
    locale.add_argument("lang", help="Language code, e.g. ru, kk, en")

    cert = sub.add_parser("cert", help="Read a certificate field")
    _add_store_args(cert)
    cert.add_argument("--field", required=True, choices=("not-before", "not-after", "subject", "issuer"))

    rdn = sub.add_parser("rdn", help="Read a subject RDN by OID")
    _add_store_args(rdn)
    rdn.add_argument("--oid", default="2.5.4.3")
    rdn.add_argument("--index", type=int, default=0)

    sign = sub.add_parser("sign", help="Sign plain data")
    _add_store_args(sign)
    sign.add_argument("--data", required=True)

    verify = sub.add_parser("verify", help="Verify a plain-data signature")
    _add_store_args(verify)
    verify.add_argument("--data", required=True)
    verify.add_argument("--signature", required=True)

    return parser


def _form_input(args: argparse.Namespace) -> dict[str, object]:
    changes: dict[str, object] = {}
    if getattr(args, "alias", None):
        changes["alias"] = args.alias
    if getattr(args, "path", None):
        changes["path"] = args.path
    if hasattr(args, "password"):
        changes["password"] = args.password if args.password is not None else getpass.getpass("Password: ")
    for attr, field_name in (
        ("key_type", "key_type"),
        ("key_alias", "key_alias"),
        ("oid", "oid"),
        ("data", "plain_data"),
        ("signature", "plain_data_signed"),
        ("lang", "lang"),
    ):
        value = getattr(args, attr, None)
        if value:
            changes[field_name] = value
    return changes


def _print_update(update: FormUpdate) -> None:
    for key, value in update.changes.items():
        if isinstance(value, tuple):
            print(f"{key}:")
            for item in value:
                print(f"  {item}")
            continue
        print(f"{key}: {value}")


async def _run(args: argparse.Namespace) -> int:
    settings = load_settings()
    if args.url:
        settings = replace(settings, connection=replace(settings.connection, url=args.url))

    async with NCALayerClient(settings) as client:
        if not client.ready:
            print(f"middleware unreachable at {settings.connection.url}", file=sys.stderr)
            return EXIT_UNREACHABLE

        client.update(**_form_input(args))
        try:
            update = await COMMANDS[args.command](client, args)
        except (CallAbortedError, ChannelNotReadyError) as exc:
            print(str(exc), file=sys.stderr)
            return EXIT_UNREACHABLE
        except MissingArgumentError as exc:
            print(str(exc), file=sys.stderr)
            return EXIT_FAILED

    if update.error is not None:
        print(update.error.message, file=sys.stderr)
        return EXIT_FAILED
    _print_update(update)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    return asyncio.run(_run(args))


__all__ = ["build_parser", "main"]
