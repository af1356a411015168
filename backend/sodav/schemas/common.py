"""Shared response pieces for paginated listings."""

import math

from pydantic import BaseModel


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int


def page_of(total: int, page: int, limit: int) -> Pagination:
    return Pagination(
        total=total, page=page, limit=limit,
        total_pages=math.ceil(total / limit) if limit else 0,
    )
