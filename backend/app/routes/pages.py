"""
Naviga8 Backend - Static Page Routes
======================================

What:  Serves the two HTML pages of the map client.
How:   FileResponse from settings.public_dir; a missing file answers 404.
"""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

from app.config import settings
from app.exceptions import NotFoundError

router = APIRouter(tags=["Pages"], include_in_schema=False)


def _page(name: str) -> FileResponse:
    path = Path(settings.public_dir) / name
    if not path.is_file():
        raise NotFoundError(resource="page", resource_id=name)
    return FileResponse(path=str(path), media_type="text/html")


@router.get("/")
async def map_page() -> FileResponse:
    return _page("map.html")


@router.get("/saved-routes.html")
async def saved_routes_page() -> FileResponse:
    return _page("saved-routes.html")
