"""Static entry page.

GET /  and any GET path not handled by another router
    Serve ``public/index.html``. This router must be included last so its
    catch-all route does not shadow the API. An ``/embed/`` URL whose id
    holds an encoded slash also lands here and is handed back to the embed
    handler, which rejects the id.
"""

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, Response

from .embed import embed, encoded_slash_post_id

router = APIRouter(tags=["pages"])

PUBLIC_DIR = Path(__file__).resolve().parent.parent / "public"
INDEX_PAGE = PUBLIC_DIR / "index.html"


@router.get("/", include_in_schema=False)
async def index() -> FileResponse:
    return FileResponse(INDEX_PAGE, media_type="text/html")


@router.get("/{full_path:path}", include_in_schema=False)
async def fallback(request: Request, full_path: str) -> Response:
    post_id = encoded_slash_post_id(request.scope.get("raw_path"))
    if post_id is not None:
        return await embed(request, post_id)
    return FileResponse(INDEX_PAGE, media_type="text/html")
