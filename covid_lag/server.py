"""Static file server for the dashboard assets.

Serves files under a fixed root directory.  Directory paths resolve to
their ``index.html``; anything that does not resolve to a file inside the
root gets a plain ``404 Not Found``.  Script sources (``.js`` and ``.ts``)
are served as ``text/javascript``.
"""

from __future__ import annotations

import argparse
import logging
import os
from http import HTTPStatus
from pathlib import Path
from typing import Optional, Sequence

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import FileResponse, JSONResponse, PlainTextResponse, Response
from starlette.routing import Route

from .config import STATIC_DIR

logger = logging.getLogger(__name__)

DEFAULT_PORT: int = 8080
INDEX_DOCUMENT: str = "index.html"
SCRIPT_SUFFIXES = (".js", ".ts")
# Editors and patch tools leave ``*.orig`` copies; requests for them get the original.
STRIPPED_SUFFIX: str = ".orig"


def resolve_static_path(root: Path, url_path: str) -> Optional[Path]:
    """Map a decoded URL path onto a file under ``root``.

    Returns ``None`` when the path escapes the root, is not a valid
    filesystem path, or no file exists.
    """
    if url_path.endswith(STRIPPED_SUFFIX):
        url_path = url_path[: -len(STRIPPED_SUFFIX)]

    base = root.resolve()
    try:
        candidate = (base / url_path.lstrip("/")).resolve()
        if candidate != base and base not in candidate.parents:
            return None
        if candidate.is_dir():
            candidate = candidate / INDEX_DOCUMENT
        if not candidate.is_file():
            return None
    except (OSError, ValueError):
        # NUL bytes and over-long names cannot name a file on disk.
        return None
    return candidate


def create_app(root: Path | str = STATIC_DIR) -> Starlette:
    """Build the ASGI application serving files from ``root``."""
    root = Path(root)

    async def hello(request: Request) -> Response:
        return JSONResponse({"hi": "there"}, media_type="text/plain")

    async def static_file(request: Request) -> Response:
        url_path = request.url.path
        filepath = resolve_static_path(root, url_path)
        if filepath is None:
            logger.info("404 %s", url_path)
            return PlainTextResponse("404 Not Found", status_code=HTTPStatus.NOT_FOUND)

        media_type = "text/javascript" if filepath.suffix in SCRIPT_SUFFIXES else None
        return FileResponse(filepath, media_type=media_type)

    return Starlette(
        routes=[
            Route("/hi", hello),
            Route("/{path:path}", static_file),
        ]
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    from uvicorn import run as uvicorn_run

    parser = argparse.ArgumentParser(description="Serve the dashboard's static files.")
    parser.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", DEFAULT_PORT)))
    parser.add_argument("--root", type=Path, default=STATIC_DIR)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("HTTP webserver running. Access it at: http://localhost:%d/", args.port)
    uvicorn_run(create_app(args.root), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
