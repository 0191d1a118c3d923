# backend_api/services/base.py
import math
from typing import Dict, List

from sqlalchemy.orm import Query

from backend_api.errors import InvalidInput

DEFAULT_PAGE = 0
DEFAULT_SIZE = 10
MAX_SIZE = 100


class PageRequest:
    """
    Ventana de resultados pedida por el cliente.
    sort_by usa el nombre del campo en la API (camelCase).
    """

    def __init__(self, page: int = DEFAULT_PAGE, size: int = DEFAULT_SIZE,
                 sort_by: str = None, sort_dir: str = None):
        if page < 0:
            raise InvalidInput("Invalid pagination", {"page": "must be greater than or equal to 0"})
        if size < 1 or size > MAX_SIZE:
            raise InvalidInput("Invalid pagination", {"size": f"must be between 1 and {MAX_SIZE}"})
        self.page = page
        self.size = size
        self.sort_by = sort_by
        self.sort_dir = sort_dir

    @property
    def descending(self) -> bool:
        return (self.sort_dir or "").lower() == "desc"

    def with_default_sort(self, sort_by: str, sort_dir: str) -> "PageRequest":
        """Rellena el orden por defecto del recurso si el cliente no lo indicó."""
        return PageRequest(
            self.page,
            self.size,
            self.sort_by or sort_by,
            self.sort_dir or sort_dir,
        )


class Page:
    """Una página de resultados (content + metadatos)."""

    def __init__(self, content: List, page: int, size: int, total_elements: int):
        self.content = content
        self.page = page
        self.size = size
        self.total_elements = total_elements
        self.total_pages = math.ceil(total_elements / size) if size else 0
        self.first = page == 0
        self.last = page + 1 >= self.total_pages

    def __len__(self) -> int:
        return len(self.content)


def paginate(query: Query, request: PageRequest, sortable: Dict, id_column) -> Page:
    """
    Aplica orden y ventana a `query`.
    `sortable` traduce el nombre de la API a la columna; el id desempata.
    """
    order = []
    if request.sort_by:
        column = sortable.get(request.sort_by)
        if column is None:
            raise InvalidInput(
                f"Cannot sort by '{request.sort_by}'",
                {"sortBy": "must be one of: " + ", ".join(sorted(sortable))},
            )
        order.append(column.desc() if request.descending else column.asc())
    order.append(id_column.desc() if request.descending else id_column.asc())

    total = query.order_by(None).count()
    items = (
        query.order_by(*order)
        .offset(request.page * request.size)
        .limit(request.size)
        .all()
    )
    return Page(items, request.page, request.size, total)
