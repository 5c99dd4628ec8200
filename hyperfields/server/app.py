"""FastAPI application serving registered admin pages."""

from __future__ import annotations

import argparse
import importlib
import logging
from typing import List, Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from ..config import HyperFieldsConfig, configure_logging, load_config
from ..host import HostServices, get_default_host
from ..template_loader import TemplateLoader, get_template_loader, set_template_loader
from ..utils.paths import get_static_directory
from .routes import admin_router

logger = logging.getLogger(__name__)


def create_app(host: Optional[HostServices] = None, config: Optional[HyperFieldsConfig] = None) -> FastAPI:
    """
    Create the admin application.

    Args:
        host: Host services holding the registered pages; the process-wide
            default host is used when omitted.
        config: Overrides ``host.config`` for the application title and assets.

    Returns:
        Configured FastAPI application
    """
    host = host or get_default_host()
    config = config or host.config
    if config.template_dir is not None:
        set_template_loader(TemplateLoader(config.template_dir))
    host.boot()

    app = FastAPI(title="HyperFields Admin", version=config.version)
    app.state.host = host
    app.state.templates = get_template_loader()

    static_path = get_static_directory()
    if static_path.exists():
        app.mount("/assets", StaticFiles(directory=str(static_path)), name="assets")

    app.include_router(admin_router)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "pages": len(host.menu.entries())}

    logger.info("Admin application ready with %d pages", len(host.menu.entries()))
    return app


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="hyperfields-server", description="Serve HyperFields admin pages.")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8080, help="Port to listen on (default: 8080)")
    parser.add_argument(
        "--module",
        "-m",
        action="append",
        default=[],
        help="Module declaring options pages; imported before the app is built (repeatable)",
    )
    parser.add_argument("--log-level", default=None, help="Overrides HYPERFIELDS_LOG_LEVEL")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    import uvicorn

    args = _parse_args(argv)
    config = load_config()
    configure_logging(args.log_level or config.log_level)

    for module_name in args.module:
        logger.info("Loading pages from %s", module_name)
        importlib.import_module(module_name)

    app = create_app(config=config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=(args.log_level or config.log_level).lower())


if __name__ == "__main__":
    main()
