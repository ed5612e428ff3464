"""Interactive console for the IP matcher.

Reads one command per line, applies it to a :class:`Matcher` and prints the
result. ``ipmatcher serve`` runs the HTTP API instead.
"""

from __future__ import annotations

import argparse
import sys
from typing import TextIO

from ipmatcher.core.errors import ConfigurationError, InvalidAddressError, ValidationError
from ipmatcher.core.logging import configure_logging
from ipmatcher.seed import apply_seed, load_seed_file
from ipmatcher.services.matcher import Matcher
from ipmatcher.settings import Settings, get_settings

PROMPT = "Command [? for help] > "

MENU = """\
Commands:

  all                          retrieve all stored addresses and netmasks
  add <network> <netmask>      add a network to the match list
                               ex: add 192.168.1.0 255.255.255.0
  del <network>                remove a network from the match list
                               ex: del 192.168.1.0
  exists <network> <netmask>   check if network exists in match list
                               ex: exists 192.168.1.0 255.255.255.0
  match <address>              test if an address matches something
                               ex: match 192.168.1.36
  q                            quit
"""


def handle_command(matcher: Matcher, line: str, out: TextIO) -> bool:
    """Run one console command. Returns False when the user asked to quit."""
    line = line.lower().strip()
    if not line:
        return True

    parts = line.split()
    command, args = parts[0], parts[1:]

    if line == "?":
        out.write(MENU + "\n")
    elif line == "q":
        return False
    elif line == "all":
        networks = matcher.all()
        if networks:
            for network in networks:
                out.write(f"  {network}\n")
        else:
            out.write("(none)\n")
    elif command == "add" and len(args) == 2:
        matcher.add(args[0], args[1])
    elif command == "del" and len(args) == 1:
        matcher.remove(args[0])
    elif command == "exists" and len(args) == 2:
        if matcher.exists(args[0], args[1]):
            out.write(f"{args[0]} {args[1]} exists\n")
        else:
            out.write(f"{args[0]} {args[1]} does not exist\n")
    elif command == "match" and len(args) == 1:
        if matcher.match_exists(args[0]):
            out.write(f"{args[0]} matches\n")
        else:
            out.write(f"{args[0]} does not match\n")

    return True


def run_console(matcher: Matcher, stdin: TextIO, stdout: TextIO) -> None:
    while True:
        stdout.write(PROMPT)
        stdout.flush()
        line = stdin.readline()
        if not line:
            stdout.write("\n")
            return
        try:
            if not handle_command(matcher, line, stdout):
                return
        except InvalidAddressError as exc:
            stdout.write(f"error: {exc.message}\n")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ipmatcher",
        description="Match IPv4 addresses against a list of networks.",
    )
    parser.add_argument(
        "--seed-file",
        default=None,
        help="YAML/JSON file with networks to load first. Falls back to SEED_FILE.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level. Falls back to LOG_LEVEL (default: INFO).",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON structured logs.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Echo matcher log lines to the console.",
    )

    subparsers = parser.add_subparsers(dest="command")
    serve = subparsers.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default=None, help="Bind address. Falls back to HOST.")
    serve.add_argument("--port", type=int, default=None, help="Bind port. Falls back to PORT.")
    return parser


def _resolve_settings(args: argparse.Namespace) -> Settings:
    settings = get_settings()
    overrides: dict[str, object] = {}
    if args.seed_file is not None:
        overrides["seed_file"] = args.seed_file
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if args.json_logs:
        overrides["log_json"] = True
    if getattr(args, "host", None) is not None:
        overrides["host"] = args.host
    if getattr(args, "port", None) is not None:
        overrides["port"] = args.port
    if not overrides:
        return settings
    return Settings(**{**settings.model_dump(), **overrides})


def _serve(settings: Settings) -> int:
    import uvicorn

    from ipmatcher.api.main import create_app

    uvicorn.run(
        create_app(settings=settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    settings = _resolve_settings(args)
    configure_logging(level=settings.log_level, json_format=settings.log_json)

    if args.command == "serve":
        return _serve(settings)

    matcher = Matcher.from_settings(settings, log=print if args.verbose else None)
    if settings.seed_file:
        try:
            apply_seed(matcher, load_seed_file(settings.seed_file))
        except (ConfigurationError, ValidationError) as exc:
            print(f"[ipmatcher] ERROR: {exc.message}", file=sys.stderr)
            return 1

    run_console(matcher, sys.stdin, sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
