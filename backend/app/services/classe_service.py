from __future__ import annotations

import logging
from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import unit_of_work
from app.db.store import EntityStore, contains_ci
from app.models import Apprenant, Classe
from app.schemas.classes import ClasseCreate, ClasseDTO, ClasseUpdate
from app.schemas.common import PageResponse, build_page
from app.services.mappers import classe_to_dto
from app.services.relations import RelationService
from app.validation.entities import ClasseValidator

"""
Classe Service.

Rôle (fonctionnel) :
- CRUD des classes (numéro de salle unique).
- Consultation : liste paginée, recherche par nom, classes ayant moins de N apprenants.
- Relations vues depuis la classe : les affectations restent portées par l’apprenant /
  le formateur (mêmes règles que depuis leurs propres routes).

Suppression : apprenants et formateurs de la classe sont détachés (classe_id = NULL)
avant le DELETE.
"""

log = logging.getLogger("app.classes")


class ClasseService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.store = EntityStore(db)
        self.validator = ClasseValidator(self.store)
        self.relations = RelationService(db)

    async def _dto(self, classe_id: int) -> ClasseDTO:
        return classe_to_dto(await self.store.get(Classe, classe_id))

    async def create(self, payload: ClasseCreate) -> ClasseDTO:
        async with unit_of_work(self.db):
            values = await self.validator.validate_for_create(payload)
            classe = await self.store.save(Classe(**values))

        log.info("classe_created", extra={"entity": "Classe", "entity_id": classe.id})
        return await self._dto(classe.id)

    async def update(self, classe_id: int, payload: ClasseUpdate) -> ClasseDTO:
        async with unit_of_work(self.db):
            classe = await self.store.get(Classe, classe_id)
            values = await self.validator.validate_for_update(classe_id, payload)
            for key, value in values.items():
                setattr(classe, key, value)
            await self.store.save(classe)

        log.info("classe_updated", extra={"entity": "Classe", "entity_id": classe_id})
        return await self._dto(classe_id)

    async def delete(self, classe_id: int) -> None:
        async with unit_of_work(self.db):
            classe = await self.store.get(Classe, classe_id)

            for member in [*classe.apprenants, *classe.formateurs]:
                member.classe_id = None
            await self.db.flush()

            await self.store.delete(classe)

        log.info("classe_deleted", extra={"entity": "Classe", "entity_id": classe_id})

    async def get(self, classe_id: int) -> ClasseDTO:
        return await self._dto(classe_id)

    async def list(self, *, page: int, page_size: int) -> PageResponse[ClasseDTO]:
        stmt = select(Classe).order_by(Classe.id)
        items, total = await self.store.paginate(stmt, page=page, page_size=page_size)
        return build_page([classe_to_dto(c) for c in items], page=page, page_size=page_size, total=total)

    async def search(self, nom: str) -> List[ClasseDTO]:
        rows = await self.store.find_all(select(Classe).where(contains_ci(Classe.nom, nom)).order_by(Classe.id))
        return [classe_to_dto(c) for c in rows]

    async def find_available(self, max_capacity: int) -> List[ClasseDTO]:
        """Filtre de consultation : classes comptant strictement moins de `max_capacity` apprenants."""
        effectif = (
            select(func.count(Apprenant.id))
            .where(Apprenant.classe_id == Classe.id)
            .correlate(Classe)
            .scalar_subquery()
        )
        rows = await self.store.find_all(select(Classe).where(effectif < max_capacity).order_by(Classe.id))
        return [classe_to_dto(c) for c in rows]

    # --- Relations ---

    async def assign_apprenant(self, classe_id: int, apprenant_id: int) -> ClasseDTO:
        await self.relations.assign_apprenant_to_classe(apprenant_id, classe_id)
        return await self._dto(classe_id)

    async def remove_apprenant(self, classe_id: int, apprenant_id: int) -> ClasseDTO:
        await self.relations.remove_apprenant_from_classe(apprenant_id, classe_id)
        return await self._dto(classe_id)

    async def assign_formateur(self, classe_id: int, formateur_id: int) -> ClasseDTO:
        await self.relations.assign_formateur_to_classe(formateur_id, classe_id)
        return await self._dto(classe_id)

    async def remove_formateur(self, classe_id: int, formateur_id: int) -> ClasseDTO:
        await self.relations.remove_formateur_from_classe(formateur_id, classe_id)
        return await self._dto(classe_id)
