from __future__ import annotations

import logging
from typing import List

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.db.session import unit_of_work
from app.db.store import EntityStore, contains_ci
from app.models import Formateur, Formation
from app.schemas.common import PageResponse, build_page
from app.schemas.formateurs import FormateurCreate, FormateurDTO, FormateurUpdate
from app.services.mappers import formateur_to_dto
from app.services.relations import RelationService
from app.validation.entities import FormateurValidator

"""
Formateur Service.

Rôle (fonctionnel) :
- CRUD des formateurs (email unique parmi les formateurs).
- Consultation : liste paginée, recherche nom/prénom, par email, par spécialité,
  formateurs disponibles (moins de N formations), liste des spécialités.
- Relations : classe (au plus une), formations animées (délégué à RelationService).
"""

log = logging.getLogger("app.formateurs")


def _formations_count():
    return (
        select(func.count(Formation.id))
        .where(Formation.formateur_id == Formateur.id)
        .correlate(Formateur)
        .scalar_subquery()
    )


class FormateurService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.store = EntityStore(db)
        self.validator = FormateurValidator(self.store)
        self.relations = RelationService(db)

    async def _dto(self, formateur_id: int) -> FormateurDTO:
        return formateur_to_dto(await self.store.get(Formateur, formateur_id))

    async def create(self, payload: FormateurCreate) -> FormateurDTO:
        async with unit_of_work(self.db):
            values = await self.validator.validate_for_create(payload)
            formateur = await self.store.save(Formateur(**values))

        log.info("formateur_created", extra={"entity": "Formateur", "entity_id": formateur.id})
        return await self._dto(formateur.id)

    async def update(self, formateur_id: int, payload: FormateurUpdate) -> FormateurDTO:
        async with unit_of_work(self.db):
            formateur = await self.store.get(Formateur, formateur_id)
            values = await self.validator.validate_for_update(formateur_id, payload)
            for key, value in values.items():
                setattr(formateur, key, value)
            await self.store.save(formateur)

        log.info("formateur_updated", extra={"entity": "Formateur", "entity_id": formateur_id})
        return await self._dto(formateur_id)

    async def delete(self, formateur_id: int) -> None:
        async with unit_of_work(self.db):
            formateur = await self.store.get(Formateur, formateur_id)

            # Les formations animées perdent leur formateur (pas de référence pendante)
            for formation in list(formateur.formations):
                formation.formateur_id = None
            await self.db.flush()

            await self.store.delete(formateur)

        log.info("formateur_deleted", extra={"entity": "Formateur", "entity_id": formateur_id})

    async def get(self, formateur_id: int) -> FormateurDTO:
        return await self._dto(formateur_id)

    async def list(self, *, page: int, page_size: int) -> PageResponse[FormateurDTO]:
        stmt = select(Formateur).order_by(Formateur.id)
        items, total = await self.store.paginate(stmt, page=page, page_size=page_size)
        return build_page([formateur_to_dto(f) for f in items], page=page, page_size=page_size, total=total)

    async def search(self, term: str, *, page: int, page_size: int) -> PageResponse[FormateurDTO]:
        stmt = (
            select(Formateur)
            .where(or_(contains_ci(Formateur.nom, term), contains_ci(Formateur.prenom, term)))
            .order_by(Formateur.id)
        )
        items, total = await self.store.paginate(stmt, page=page, page_size=page_size)
        return build_page([formateur_to_dto(f) for f in items], page=page, page_size=page_size, total=total)

    async def find_by_email(self, email: str) -> FormateurDTO:
        formateur = await self.store.find_one(
            select(Formateur).where(Formateur.email == email.strip().lower())
        )
        if formateur is None:
            raise NotFoundError("Formateur", email=email)
        return formateur_to_dto(formateur)

    async def find_by_specialite(self, specialite: str) -> List[FormateurDTO]:
        rows = await self.store.find_all(
            select(Formateur)
            .where(func.lower(Formateur.specialite) == specialite.strip().lower())
            .order_by(Formateur.id)
        )
        return [formateur_to_dto(f) for f in rows]

    async def find_available(self, specialite: str, max_formations: int) -> List[FormateurDTO]:
        """Formateurs de la spécialité animant strictement moins de `max_formations` formations."""
        rows = await self.store.find_all(
            select(Formateur)
            .where(func.lower(Formateur.specialite) == specialite.strip().lower())
            .where(_formations_count() < max_formations)
            .order_by(Formateur.id)
        )
        return [formateur_to_dto(f) for f in rows]

    async def list_specialites(self) -> List[str]:
        rows = await self.db.execute(select(Formateur.specialite).distinct().order_by(Formateur.specialite))
        return list(rows.scalars().all())

    # --- Relations ---

    async def assign_to_classe(self, formateur_id: int, classe_id: int) -> FormateurDTO:
        await self.relations.assign_formateur_to_classe(formateur_id, classe_id)
        return await self._dto(formateur_id)

    async def remove_from_classe(self, formateur_id: int, classe_id: int) -> FormateurDTO:
        await self.relations.remove_formateur_from_classe(formateur_id, classe_id)
        return await self._dto(formateur_id)

    async def assign_to_formation(self, formateur_id: int, formation_id: int) -> FormateurDTO:
        await self.relations.assign_formateur_to_formation(formateur_id, formation_id)
        return await self._dto(formateur_id)

    async def remove_from_formation(self, formateur_id: int, formation_id: int) -> FormateurDTO:
        await self.relations.remove_formateur_from_formation(formateur_id, formation_id)
        return await self._dto(formateur_id)
