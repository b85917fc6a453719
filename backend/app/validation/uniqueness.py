from __future__ import annotations

from typing import Type

from app.core.errors import ConflictError
from app.db.store import EntityStore
from app.models import Apprenant, Formateur

"""
Contrôles d’unicité.

Rejet précoce et lisible des doublons (email par type d’entité, numéro de salle).
La contrainte UNIQUE en base reste l’arbitre final en cas d’écritures concurrentes
(IntegrityError -> 409 dans app.main).
"""


async def validate_unique_email(
    store: EntityStore,
    model: Type[Apprenant] | Type[Formateur],
    email: str,
    exclude_id: int | None = None,
) -> None:
    if await store.exists_by_email(model, email, exclude_id=exclude_id):
        raise ConflictError(
            "Cet email est déjà utilisé",
            entity=model.__name__,
            email=email,
            exclude_id=exclude_id,
        )


async def validate_unique_num_salle(store: EntityStore, num_salle: str, exclude_id: int | None = None) -> None:
    if await store.exists_by_num_salle(num_salle, exclude_id=exclude_id):
        raise ConflictError(
            f"Le numéro de salle {num_salle} est déjà utilisé",
            num_salle=num_salle,
            exclude_id=exclude_id,
        )
