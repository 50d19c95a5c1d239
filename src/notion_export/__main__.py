# ABOUTME: CLI entry point for notion-export.
# ABOUTME: Provides 'serve' and 'render' commands.

import argparse
import logging
from logging.handlers import RotatingFileHandler
import sys
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from .api import create_app
from .config import load_settings, ConfigError, Settings
from .errors import ExportError, InvalidRequestError
from .export import export_page
from .notion import NotionClient, parse_page_id

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


def setup_logging(log_path: Path | None = None, level: int = logging.INFO) -> None:
    """Configure logging for the application.

    Args:
        log_path: Optional path for log file. If provided, enables rotating file logging.
        level: Root log level.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Console handler (stderr keeps stdout free for rendered output)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(log_format, date_format))
    root_logger.addHandler(console_handler)

    # File handler with rotation (if log_path provided)
    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(log_format, date_format))
        root_logger.addHandler(file_handler)

    # Suppress noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def cmd_serve(args: argparse.Namespace, settings: Settings) -> None:
    """Run the HTTP API."""
    logger = logging.getLogger(__name__)
    logger.info(f"Serving on http://{args.host}:{args.port}")

    app = create_app(settings)
    uvicorn.run(app, host=args.host, port=args.port, log_config=None)


def cmd_render(args: argparse.Namespace, settings: Settings) -> None:
    """Render one page to stdout or a file."""
    logger = logging.getLogger(__name__)

    try:
        token = settings.get_token()
        page_id = parse_page_id(args.page_id)
        if page_id is None:
            raise InvalidRequestError(f"Invalid page ID: {args.page_id!r}")
        exported = export_page(NotionClient(token), page_id, settings)
    except ExportError as e:
        logger.error(f"Export failed: {e.message}" + (f" ({e.details})" if e.details else ""))
        sys.exit(1)

    if args.output:
        output = args.output
        if output.is_dir():
            output = output / exported.filename
        output.write_text(exported.markdown, encoding="utf-8")
        logger.info(f"Wrote {output}")
    else:
        sys.stdout.write(exported.markdown + "\n")


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="notion-export",
        description="Export Notion pages as styled Markdown",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to config file (default: $NOTION_EXPORT_CONFIG, else built-in defaults)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP API",
    )
    serve_parser.add_argument("--host", default=DEFAULT_HOST, help=f"Bind address (default: {DEFAULT_HOST})")
    serve_parser.add_argument("--port", type=int, default=DEFAULT_PORT, help=f"Port (default: {DEFAULT_PORT})")

    # render command
    render_parser = subparsers.add_parser(
        "render",
        help="Render a page immediately",
    )
    render_parser.add_argument("page_id", help="Notion page ID or URL")
    render_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Write to this file or directory instead of stdout",
    )

    args = parser.parse_args()
    load_dotenv()

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        setup_logging()
        logging.getLogger(__name__).error(f"Configuration error: {e}")
        sys.exit(1)

    log_path = Path(settings.log_file) if settings.log_file else None
    setup_logging(log_path, logging.DEBUG if args.verbose else logging.INFO)

    if args.command == "serve":
        cmd_serve(args, settings)
    elif args.command == "render":
        cmd_render(args, settings)


if __name__ == "__main__":
    main()
