# backend_api/routers/paging.py
from typing import Optional

from fastapi import Query

from backend_api.services.base import DEFAULT_PAGE, DEFAULT_SIZE, MAX_SIZE, PageRequest


def page_params(
    page: int = Query(DEFAULT_PAGE, ge=0),
    size: int = Query(DEFAULT_SIZE, ge=1, le=MAX_SIZE),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_dir: Optional[str] = Query(None, alias="sortDir"),
) -> PageRequest:
    return PageRequest(page=page, size=size, sort_by=sort_by, sort_dir=sort_dir)


def search_page_params(
    page: int = Query(DEFAULT_PAGE, ge=0),
    size: int = Query(DEFAULT_SIZE, ge=1, le=MAX_SIZE),
) -> PageRequest:
    """Las búsquedas siempre van por fecha de creación, más recientes primero."""
    return PageRequest(page=page, size=size, sort_by="createdAt", sort_dir="desc")
