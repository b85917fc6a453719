from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, Query, Request

from app.core.security import require_api_key
from app.core.settings import settings

"""
Dépendances API.

Rôle (fonctionnel) :
- Centralise les dépendances réutilisables sur les routes :
  - protection des routes d’écriture par clé API (WriteAuthDep) ;
  - paramètres de pagination (page, page_size) bornés par MAX_PAGE_SIZE.
"""


async def require_write_auth(request: Request) -> None:
    await require_api_key(request)


# Dépendance prête à l’emploi pour protéger un endpoint d’écriture
WriteAuthDep = Depends(require_write_auth)


@dataclass(frozen=True)
class Pagination:
    page: int
    page_size: int


def pagination(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> Pagination:
    return Pagination(page=page, page_size=page_size)
