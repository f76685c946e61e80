"""
=============================================================================
COMMAND LINE ENTRY POINT
=============================================================================

    python -m minihttpd 8080                     # port as the only argument
    python -m minihttpd --port 8080 --root ./public
    python -m minihttpd -p 8080 --root-policy redirect
    python -m minihttpd -p 8080 --lenient-headers --log-level DEBUG

Invalid settings (bad port, missing root directory, ...) are reported on
stderr and the process exits with status 1 before any socket is opened.

=============================================================================
"""

import argparse
import sys
from typing import Optional, Sequence

from . import __version__
from .config import ServerConfig, ROOT_POLICIES, LOG_LEVELS, LOG_FORMATS
from .handlers import DEFAULT_CHUNK_SIZE
from .server import FileServer


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="minihttpd",
        description="Minimal HTTP file server: one connection at a time",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m minihttpd 8080                          # Serve . on port 8080
  python -m minihttpd -p 8080 -r ./public           # Serve ./public
  python -m minihttpd -p 8080 --root-policy redirect
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "port_arg",
        nargs="?",
        type=int,
        metavar="PORT",
        help="Port to listen on (same as --port)",
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: 8080)",
    )

    parser.add_argument(
        "--host", "-H",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1, use 0.0.0.0 for all interfaces)",
    )

    parser.add_argument(
        "--allow-privileged-ports",
        action="store_true",
        help="Allow ports 1-1023",
    )

    # ─────────────────────────────────────────────────────────────────────
    # DOCUMENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--root", "-r",
        default=".",
        help="Directory to serve files from (default: current directory)",
    )

    parser.add_argument(
        "--default-document",
        default="index.html",
        help="Document served for / (default: index.html)",
    )

    parser.add_argument(
        "--not-found-document",
        default="404.html",
        help="Document served with 404 (default: 404.html)",
    )

    parser.add_argument(
        "--bad-request-document",
        default=None,
        help="HTML document served with 400 (default: empty body)",
    )

    parser.add_argument(
        "--root-policy",
        choices=ROOT_POLICIES,
        default="serve",
        help="Answer / with 200 (serve) or 301 (redirect) (default: serve)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # PROTOCOL ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--lenient-headers",
        action="store_true",
        help="Skip header lines without a colon instead of answering 400",
    )

    parser.add_argument(
        "--chunk-size",
        type=int,
        default=DEFAULT_CHUNK_SIZE,
        help=f"Chunk size for binary files (default: {DEFAULT_CHUNK_SIZE})",
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING / META
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default="INFO",
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default="text",
        help="Access log format (default: text)",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"minihttpd {__version__}",
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Translate parsed arguments into a ServerConfig."""
    port = args.port if args.port is not None else args.port_arg
    return ServerConfig(
        host=args.host,
        port=port if port is not None else 8080,
        allow_privileged_ports=args.allow_privileged_ports,
        root_dir=args.root,
        default_document=args.default_document,
        not_found_document=args.not_found_document,
        bad_request_document=args.bad_request_document,
        root_policy=args.root_policy,
        strict_headers=not args.lenient_headers,
        chunk_size=args.chunk_size,
        log_level=args.log_level,
        log_format=args.log_format,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit status.
    """
    args = build_parser().parse_args(argv)
    config = config_from_args(args)

    try:
        server = FileServer(config)
    except ValueError as e:
        print(f"ERROR, {e}", file=sys.stderr)
        return 1

    try:
        server.run()
    except OSError as e:
        print(f"ERROR, {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
