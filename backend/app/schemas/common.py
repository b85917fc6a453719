from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel

"""
Schemas communs (Pydantic).

- PageMeta / PageResponse : réponses paginées {"data": [...], "meta": {...}}.
- ApiResponse : enveloppe des opérations d’écriture {"success", "message", "data"}.
"""

T = TypeVar("T")


class PageMeta(BaseModel):
    """Métadonnées de pagination (page, taille, total)."""
    page: int
    page_size: int
    total: int


class PageResponse(BaseModel, Generic[T]):
    data: List[T]
    meta: PageMeta


class ApiResponse(BaseModel, Generic[T]):
    """Réponse standard des opérations d’écriture."""
    success: bool = True
    message: str
    data: Optional[T] = None


def ensure_utc(value: Any) -> Any:
    """Les datetimes naïves reçues sont considérées en UTC."""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def build_page(data: List[Any], *, page: int, page_size: int, total: int) -> PageResponse[Any]:
    return PageResponse[Any](data=data, meta=PageMeta(page=page, page_size=page_size, total=total))
