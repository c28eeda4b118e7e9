"""SEO pages routes. Read-only; listing is not wired to a data source yet."""

import logging

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

logger = logging.getLogger("shell.api.seo")

router = APIRouter(prefix="/api/seo", tags=["seo"])


def _method_not_allowed(message: str) -> JSONResponse:
    return JSONResponse({"error": "Method not allowed", "message": message}, status_code=405)


@router.get("/pages")
def list_pages(page: int = 1, page_size: int = Query(25, alias="pageSize")):
    logger.warning("GET /api/seo/pages: not implemented, returning placeholder")
    return {
        "data": [],
        "total": 0,
        "page": page,
        "pageSize": page_size,
        "hasMore": False,
        "_meta": {
            "implemented": False,
            "message": "SEO pages API is not yet implemented",
        },
    }


@router.post("/pages")
def create_page():
    return _method_not_allowed("SEO pages are read-only. Page creation is not supported.")


@router.put("/pages")
def update_page():
    return _method_not_allowed("SEO pages are read-only. Page modification is not supported.")


@router.delete("/pages")
def delete_page():
    return _method_not_allowed("SEO pages are read-only. Page deletion is not supported.")
