"""Shared schema components."""

from typing import TypeVar, Generic, List
from pydantic import BaseModel

T = TypeVar('T')


class BaseListResponse(BaseModel, Generic[T]):
    """Base class untuk semua list responses."""

    items: List[T]
    total: int
    page: int
    size: int
    pages: int

    @classmethod
    def create(cls, items: List[T], total: int, page: int, size: int):
        pages = (total + size - 1) // size if total > 0 else 0
        return cls(items=items, total=total, page=page, size=size, pages=pages)
