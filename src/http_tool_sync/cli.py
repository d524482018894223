"""Command line entry point: run one synchronization pass on a tool config file."""

import argparse
import logging
import sys

import yaml
from dotenv import load_dotenv

from . import __version__
from .config import Settings, load_settings
from .config_loader import ensure_config, load_config
from .config_schema import build_config
from .file_handler import load_tool_config, render_tool_config, write_file
from .logger import setup_logging
from .sync.models import SyncOrigin
from .tool import HttpToolForm

logger = logging.getLogger(__name__)

_DIRECTIONS = {
    "url-to-fields": SyncOrigin.URL,
    "fields-to-url": SyncOrigin.FIELDS,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="http-tool-sync",
        description="Keep an HTTP tool's url and its parameter lists in sync",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Rebuild query parameters and path variables from the url
  http-tool-sync url-to-fields weather.yml

  # Try a new url without touching the file
  http-tool-sync url-to-fields weather.yml --url 'https://api.example.com/weather/:city?units=metric'

  # Rebuild the url from the parameter lists and save it
  http-tool-sync fields-to-url weather.json --in-place

  # Create a starter config in .http_tool_sync/config.yml
  http-tool-sync init-config
        """,
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        help="Log record format (default from config, else text)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"http-tool-sync version {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    for command, origin in _DIRECTIONS.items():
        sub = subparsers.add_parser(
            command,
            help=f"Synchronize with the {origin.value} side as the source",
        )
        sub.add_argument("path", help="Tool config file (YAML or JSON)")
        sub.add_argument(
            "--url", help="Replace the url before synchronizing"
        )
        sub.add_argument(
            "--prefix",
            choices=["", "tools.0."],
            help="Form path prefix (default from config, else '')",
        )
        sub.add_argument(
            "--in-place",
            action="store_true",
            help="Write the result back instead of printing it",
        )

    subparsers.add_parser("init-config", help="Create a starter config file")
    return parser


def _sync_file(args: argparse.Namespace, settings: Settings) -> None:
    config, fmt, resolved = load_tool_config(args.path)
    form = HttpToolForm(
        config, prefix=settings.form_prefix, debounce_ms=settings.debounce_ms
    )
    if args.url is not None:
        form.set_url(args.url)

    for record in form.sync_now(_DIRECTIONS[args.command]):
        logger.info(
            "%s: %d change(s), %d -> %d field(s)",
            record.list_name,
            record.mutations,
            record.fields_before,
            record.fields_after,
        )

    output = render_tool_config(form.to_config(), fmt)
    if args.in_place:
        write_file(resolved, output)
        logger.info("Wrote %s", resolved)
    else:
        sys.stdout.write(output)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    load_dotenv()

    try:
        raw = load_config()
        unified = build_config(raw)
    except (ValueError, OSError, yaml.YAMLError) as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return 1

    setup_logging(
        debug=args.debug,
        log_file=args.log_file or unified.logging.file,
        log_format=args.log_format or unified.logging.format,
        level=unified.logging.level,
    )

    if args.command == "init-config":
        print(ensure_config())
        return 0

    try:
        settings = load_settings(
            form_prefix=args.prefix,
            debug=args.debug,
            file_settings=unified.sync,
        )
        _sync_file(args, settings)
    except (ValueError, OSError, yaml.YAMLError) as exc:
        logger.debug("Sync failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    run()
