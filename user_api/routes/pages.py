"""
User Service - Landing Page Route
=================================

What:  GET / serves static/index.html. Everything else under /static is
       handled by the StaticFiles mount registered in main.py.
"""

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse

from user_api.exceptions import NotFoundError

router = APIRouter(tags=["Pages"])


@router.get("/", include_in_schema=False)
async def index(request: Request) -> FileResponse:
    static_dir = Path(request.app.state.settings.static_dir)
    page = static_dir / "index.html"
    if not page.is_file():
        raise NotFoundError(resource="page")
    return FileResponse(path=str(page), media_type="text/html")
