"""CabinetBox server launcher.

Usage:
    cabinetbox-server [--host HOST] [--port PORT] [--reload]
"""

import argparse

import uvicorn

from cabinetbox.config import settings


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Run the CabinetBox import API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                       Start on the configured host and port
  %(prog)s --port 8080           Start on port 8080
  %(prog)s --reload              Start with auto-reload for development
        """,
    )
    parser.add_argument(
        "--host",
        default=settings.host,
        help=f"Host to bind to (default: {settings.host})",
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=settings.port,
        help=f"Port to bind to (default: {settings.port})",
    )
    parser.add_argument(
        "--reload", "-r",
        action="store_true",
        help="Enable auto-reload for development",
    )
    args = parser.parse_args(argv)

    print(f"Starting CabinetBox server on http://{args.host}:{args.port}")
    uvicorn.run(
        "cabinetbox.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="debug" if settings.debug else "info",
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
