from __future__ import annotations

import uuid
from contextvars import ContextVar

"""
Core Request ID.

Rôle (fonctionnel) :
- Stocke l’identifiant de la requête HTTP courante (X-Request-Id) dans un ContextVar.
- Utilisé par le logging JSON et par les handlers d’erreurs (champ request_id du payload).
"""

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def set_request_id(rid: str | None) -> None:
    _request_id.set(rid)


def get_request_id() -> str | None:
    return _request_id.get()


def ensure_request_id(incoming: str | None = None) -> str:
    """Réutilise le request_id entrant (nettoyé) ou en génère un nouveau (UUID4)."""
    rid = (incoming or "").strip() or str(uuid.uuid4())
    set_request_id(rid)
    return rid


def current_request_id() -> str:
    """request_id du contexte courant, généré à la volée si absent (handlers d’erreurs)."""
    return get_request_id() or ensure_request_id()
