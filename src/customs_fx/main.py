"""
Customs FX Main Entry Point

Commands:
    generate   Fetch recent weeks, write the JSON snapshot and table (default)
    table      Re-render the latest-week table from the existing snapshot
    serve      Preview server for the generated files

Examples:
    customs-fx
    customs-fx generate --weeks 4
    customs-fx table
    customs-fx serve --port 8080
"""

import argparse
import asyncio
import logging
import sys

import uvicorn
from fastapi import FastAPI

from customs_fx import __version__
from customs_fx.api import router
from customs_fx.config import get_settings
from customs_fx.export.html_table import build_table_from_snapshot
from customs_fx.generator import run_generator

logger = logging.getLogger("customs_fx")

COMMANDS = {"generate", "table", "serve"}


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    # httpx logs request URLs at INFO and the query string carries the service key
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def create_app() -> FastAPI:
    """Create the preview FastAPI application."""
    app = FastAPI(
        title="Customs FX Dashboard",
        description="Weekly KCS customs exchange rates (static snapshot preview)",
        version=__version__,
        docs_url="/docs",
        redoc_url=None,
        openapi_url="/api/v1/openapi.json",
    )
    app.include_router(router)
    return app


app = create_app()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="customs-fx",
        description="KCS weekly customs exchange rate snapshot generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Examples:")[1],
    )
    sub = parser.add_subparsers(dest="command")

    gen = sub.add_parser("generate", help="Build and write the snapshot (default)")
    gen.add_argument("--weeks", "-w", type=_positive_int, default=None, help="Weeks to fetch (default: WEEKS_TO_FETCH or 12)")
    gen.add_argument("--output", "-o", type=str, default=None, help="Output directory (default: ./public)")
    gen.add_argument("--no-table", action="store_true", help="Skip the HTML table")

    tbl = sub.add_parser("table", help="Rebuild table.html from the existing snapshot")
    tbl.add_argument("--output", "-o", type=str, default=None, help="Output directory (default: ./public)")

    srv = sub.add_parser("serve", help="Serve the generated files locally")
    srv.add_argument("--host", type=str, default=None)
    srv.add_argument("--port", type=int, default=None)

    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or argv[0] not in COMMANDS | {"-h", "--help"}:
        argv = ["generate", *argv]
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()

    overrides = {}
    if getattr(args, "weeks", None) is not None:
        overrides["weeks_to_fetch"] = args.weeks
    if getattr(args, "output", None):
        overrides["output_dir"] = args.output
    if getattr(args, "no_table", False):
        overrides["table_enabled"] = False
    if overrides:
        settings = settings.model_copy(update=overrides)

    configure_logging(settings.log_level)

    if args.command == "serve":
        host = args.host or settings.api_host
        port = args.port or settings.api_port
        logger.info(f"Serving {settings.output_dir} on http://{host}:{port}")
        uvicorn.run("customs_fx.main:app", host=host, port=port, log_level=settings.log_level.lower())
        return 0

    try:
        if args.command == "table":
            written = build_table_from_snapshot(settings)
            logger.info(f"Table rebuilt: {len(written)} files")
            return 0

        result = asyncio.run(run_generator(settings))
    except Exception:
        logger.exception("Fatal error")
        return 1

    logger.info(
        f"Generator finished: {result['weeks']} weeks, "
        f"{'changed' if result['changed'] else 'unchanged'}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
