from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Request

from app.core.errors import AppHTTPException
from app.core.settings import settings

"""
Core Security (API Key).

Rôle (fonctionnel) :
- Protège les routes d’écriture (création, modification, suppression, affectations)
  par une clé API simple.
- Formats acceptés :
  - Authorization: Bearer <token>
  - X-API-Key: <token>

Comportement :
- API_KEY configurée : la clé est requise.
- API_KEY vide et ENV != prod : bypass (dev / tests).
- API_KEY vide et ENV = prod : erreur 500 (configuration serveur invalide).
"""


def _extract_token(request: Request) -> Optional[str]:
    auth = request.headers.get("authorization")
    if auth:
        parts = auth.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1].strip()

    x_api_key = request.headers.get("x-api-key")
    if x_api_key:
        return x_api_key.strip()

    return None


async def require_api_key(request: Request) -> None:
    """Dépendance FastAPI : lève AppHTTPException si la clé est absente ou invalide."""
    expected = settings.API_KEY or ""

    if not expected:
        if settings.ENV.lower() == "prod":
            raise AppHTTPException(500, "SERVER_MISCONFIG", "API_KEY manquante côté serveur")
        return

    token = _extract_token(request)
    if not token or not secrets.compare_digest(token, expected):
        raise AppHTTPException(401, "UNAUTHORIZED", "Clé API invalide ou manquante")
