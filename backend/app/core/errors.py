from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import HTTPException

"""
Core Errors.

Rôle (fonctionnel) :
- Standardise le format des erreurs renvoyées par l’API (payload homogène).
- Définit la taxonomie des erreurs métier (validation, introuvable, conflit, transition illégale).
- Fournit une exception HTTP applicative (AppHTTPException) pour les erreurs purement transport
  (authentification, mauvaise configuration serveur).

Taxonomie métier -> HTTP :
- MISSING_FIELD / INVALID_FORMAT    -> 400
- NOT_FOUND                          -> 404
- CONFLICT / ILLEGAL_STATE_TRANSITION -> 409

Convention de réponse (exemple) :
{
  "error": {
    "code": "CONFLICT",
    "message": "L'apprenant est déjà assigné à une classe",
    "status": 409,
    "request_id": "...",
    "timestamp": "...",
    "details": {"apprenant_id": 3, "classe_id": 1}
  }
}
"""


def now_iso() -> str:
    """Timestamp ISO-8601 en UTC (utilisé dans toutes les erreurs)."""
    return datetime.now(timezone.utc).isoformat()


def error_payload(
    *,
    code: str,
    message: str,
    status: int,
    request_id: str,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    """Construit un payload d’erreur homogène pour l’API."""
    payload: Dict[str, Any] = {
        "error": {
            "code": code,
            "message": message,
            "status": status,
            "request_id": request_id,
            "timestamp": now_iso(),
        }
    }
    if details is not None:
        payload["error"]["details"] = details
    return payload


class AppHTTPException(HTTPException):
    """
    Exception HTTP applicative standardisée.

    Exemple :
        raise AppHTTPException(401, "UNAUTHORIZED", "Clé API invalide ou manquante")
    """

    def __init__(self, status_code: int, code: str, message: str, details: Any = None):
        # On conserve le format attendu par la couche de gestion d’erreurs de l’app
        super().__init__(status_code=status_code, detail={"code": code, "message": message, "details": details})


class DomainError(Exception):
    """
    Erreur métier (indépendante du transport HTTP).

    Les services et validateurs lèvent ces erreurs ; app.main les convertit
    en réponse HTTP via `status_code` et `code`.
    """

    code = "DOMAIN_ERROR"
    status_code = 400

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details

    def __str__(self) -> str:
        return self.message


class ValidationError(DomainError):
    """Échec de validation d’un champ (corrigeable par l’appelant)."""

    code = "VALIDATION_ERROR"
    status_code = 400


class MissingFieldError(ValidationError):
    code = "MISSING_FIELD"

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(message or f"Le champ {field} est obligatoire", field=field)


class InvalidFormatError(ValidationError):
    code = "INVALID_FORMAT"

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(message or f"Le champ {field} est invalide", field=field)


class NotFoundError(DomainError):
    """Entité référencée inexistante (par id, ou par un autre critère : NotFoundError("Apprenant", email=...))."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity: str, entity_id: Any = None, **criteria: Any) -> None:
        if not criteria:
            criteria = {"id": entity_id}
        described = ", ".join(f"{key}={value}" for key, value in criteria.items())
        super().__init__(f"{entity} introuvable ({described})", entity=entity, **criteria)


class ConflictError(DomainError):
    """Invariant de relation ou de cycle de vie violé (déjà assigné, capacité, statut, doublon)."""

    code = "CONFLICT"
    status_code = 409


class IllegalStateTransitionError(ConflictError):
    """Transition de statut de formation refusée par la machine à états."""

    code = "ILLEGAL_STATE_TRANSITION"

    def __init__(self, current: Any, requested: Any, message: str | None = None, **details: Any) -> None:
        current_value = getattr(current, "value", current)
        requested_value = getattr(requested, "value", requested)
        super().__init__(
            message or f"Transition de statut interdite : {current_value} -> {requested_value}",
            current=current_value,
            requested=requested_value,
            **details,
        )
        self.current = current
        self.requested = requested
