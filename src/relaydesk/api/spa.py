"""Serve the built admin console (single-page app) from the backend."""

from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import FileResponse

from relaydesk.observability.logging import get_logger

logger = get_logger(__name__)


def mount_spa(app: FastAPI, build_dir: str | Path) -> bool:
    """Register the catch-all GET route. Must be called after all API routers.

    Existing files under ``build_dir`` are served as-is; any other path gets
    ``index.html`` so client-side routing works.

    Returns:
        False (nothing mounted) when the build has no index.html.
    """
    root = Path(build_dir).resolve()
    index = root / "index.html"
    if not index.is_file():
        logger.warning(
            "frontend build not found, static serving disabled",
            extra={"extra_fields": {"build_dir": str(root)}},
        )
        return False

    @app.get("/{full_path:path}", include_in_schema=False)
    def spa(full_path: str) -> FileResponse:
        candidate = (root / full_path).resolve()
        if candidate.is_file() and root in candidate.parents:
            return FileResponse(candidate)
        return FileResponse(index)

    return True
