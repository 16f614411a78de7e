"""Command-line access to the remote user directory.

This module serves as a CLI wrapper around user_federation.core.remote,
useful to check endpoint configuration before wiring the bridge in.
"""
from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from user_federation.config import load_settings
from user_federation.core.remote import (
    RemoteUserClient,
    DirectoryConfigError,
    UserSearchError,
)


def _parse_params(pairs: list[str] | None) -> dict[str, str]:
    """Turn repeated ``--param key=value`` options into an ordered dict."""
    params: dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Invalid --param '{pair}', expected key=value")
        params[key] = value
    return params


def build_client(args: argparse.Namespace) -> RemoteUserClient:
    environ = dict(os.environ)
    if args.url:
        environ["REMOTE_DIRECTORY_URL"] = args.url
    if args.trace:
        environ["REMOTE_DEBUG_LOGGING"] = "true"
    return RemoteUserClient(load_settings(environ))


def _emit(payload) -> None:
    print(json.dumps(payload, indent=2))


def main(argv: list[str] | None = None) -> None:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="Remote user directory helper")
    parser.add_argument("--url", default=None, help="Remote directory base URL (default: REMOTE_DIRECTORY_URL)")
    parser.add_argument("--trace", action="store_true", help="Log full HTTP requests and responses")
    parser.add_argument("--verbose", "-v", action="store_true")

    sub = parser.add_subparsers(dest="cmd")

    sf = sub.add_parser("find")
    sf.add_argument("--by", choices=["id", "username", "email"], default="username")
    sf.add_argument("value")

    ss = sub.add_parser("search")
    ss.add_argument("--param", action="append", metavar="KEY=VALUE")
    ss.add_argument("--first", type=int, default=None)
    ss.add_argument("--max", type=int, default=None)

    sc = sub.add_parser("count")
    sc.add_argument("--param", action="append", metavar="KEY=VALUE")

    sv = sub.add_parser("verify")
    sv.add_argument("--username", required=True)
    sv.add_argument("--password", default=os.environ.get("REMOTE_VERIFY_PASSWORD"))

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if (args.verbose or args.trace) else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    if not args.cmd:
        parser.print_help()
        return

    try:
        client = build_client(args)
    except DirectoryConfigError as e:
        print(f"[config] Error: {e}", file=sys.stderr)
        sys.exit(2)

    with client:
        if args.cmd == "find":
            finder = {
                "id": client.find_by_id,
                "username": client.find_by_username,
                "email": client.find_by_email,
            }[args.by]
            user = finder(args.value)
            _emit(user.to_dict() if user else None)
        elif args.cmd == "search":
            try:
                params = _parse_params(args.param)
            except argparse.ArgumentTypeError as e:
                parser.error(str(e))
            try:
                users = client.search_users(params, args.first, args.max)
            except UserSearchError as e:
                print(f"[search] Error: {e}", file=sys.stderr)
                sys.exit(1)
            _emit([user.to_dict() for user in users] if users is not None else None)
        elif args.cmd == "count":
            try:
                params = _parse_params(args.param)
            except argparse.ArgumentTypeError as e:
                parser.error(str(e))
            _emit({"count": client.get_user_count(params)})
        elif args.cmd == "verify":
            if not args.password:
                print("[verify] Error: --password or REMOTE_VERIFY_PASSWORD is required", file=sys.stderr)
                sys.exit(2)
            _emit({"valid": client.verify_password(args.username, args.password)})


if __name__ == "__main__":
    main()
