from __future__ import annotations

import logging
from typing import List

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.db.session import unit_of_work
from app.db.store import EntityStore, contains_ci
from app.models import Apprenant, Classe, NiveauFormation
from app.schemas.apprenants import ApprenantCreate, ApprenantDTO, ApprenantUpdate
from app.schemas.common import PageResponse, build_page
from app.services.mappers import apprenant_to_dto
from app.services.relations import RelationService
from app.validation.entities import ApprenantValidator

"""
Apprenant Service.

Rôle (fonctionnel) :
- CRUD des apprenants (validation champs + unicité email avant écriture).
- Consultation : liste paginée, recherche nom/prénom, recherche par email / niveau / classe.
- Relations : affectation à une classe, inscription à une formation (délégué à RelationService).

Toutes les méthodes retournent des DTO relus après commit (identifiants de relations à jour).
"""

log = logging.getLogger("app.apprenants")


class ApprenantService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.store = EntityStore(db)
        self.validator = ApprenantValidator(self.store)
        self.relations = RelationService(db)

    async def _dto(self, apprenant_id: int) -> ApprenantDTO:
        return apprenant_to_dto(await self.store.get(Apprenant, apprenant_id))

    # --- CRUD ---

    async def create(self, payload: ApprenantCreate) -> ApprenantDTO:
        async with unit_of_work(self.db):
            values = await self.validator.validate_for_create(payload)
            apprenant = await self.store.save(Apprenant(**values))

        log.info("apprenant_created", extra={"entity": "Apprenant", "entity_id": apprenant.id})
        return await self._dto(apprenant.id)

    async def update(self, apprenant_id: int, payload: ApprenantUpdate) -> ApprenantDTO:
        async with unit_of_work(self.db):
            apprenant = await self.store.get(Apprenant, apprenant_id)
            values = await self.validator.validate_for_update(apprenant_id, payload)
            for key, value in values.items():
                setattr(apprenant, key, value)
            await self.store.save(apprenant)

        log.info("apprenant_updated", extra={"entity": "Apprenant", "entity_id": apprenant_id})
        return await self._dto(apprenant_id)

    async def delete(self, apprenant_id: int) -> None:
        # Les inscriptions partent en cascade ; la classe n’a pas de référence à défaire
        async with unit_of_work(self.db):
            apprenant = await self.store.get(Apprenant, apprenant_id)
            await self.store.delete(apprenant)

        log.info("apprenant_deleted", extra={"entity": "Apprenant", "entity_id": apprenant_id})

    async def get(self, apprenant_id: int) -> ApprenantDTO:
        return await self._dto(apprenant_id)

    async def list(self, *, page: int, page_size: int) -> PageResponse[ApprenantDTO]:
        stmt = select(Apprenant).order_by(Apprenant.id)
        items, total = await self.store.paginate(stmt, page=page, page_size=page_size)
        return build_page([apprenant_to_dto(a) for a in items], page=page, page_size=page_size, total=total)

    # --- Recherche ---

    async def search(self, term: str, *, page: int, page_size: int) -> PageResponse[ApprenantDTO]:
        stmt = (
            select(Apprenant)
            .where(or_(contains_ci(Apprenant.nom, term), contains_ci(Apprenant.prenom, term)))
            .order_by(Apprenant.id)
        )
        items, total = await self.store.paginate(stmt, page=page, page_size=page_size)
        return build_page([apprenant_to_dto(a) for a in items], page=page, page_size=page_size, total=total)

    async def find_by_email(self, email: str) -> ApprenantDTO:
        apprenant = await self.store.find_one(
            select(Apprenant).where(Apprenant.email == email.strip().lower())
        )
        if apprenant is None:
            raise NotFoundError("Apprenant", email=email)
        return apprenant_to_dto(apprenant)

    async def find_by_niveau(self, niveau: NiveauFormation) -> List[ApprenantDTO]:
        rows = await self.store.find_all(
            select(Apprenant).where(Apprenant.niveau == niveau).order_by(Apprenant.id)
        )
        return [apprenant_to_dto(a) for a in rows]

    async def find_by_classe(self, classe_id: int) -> List[ApprenantDTO]:
        await self.store.get(Classe, classe_id)
        rows = await self.store.find_all(
            select(Apprenant).where(Apprenant.classe_id == classe_id).order_by(Apprenant.id)
        )
        return [apprenant_to_dto(a) for a in rows]

    # --- Relations ---

    async def assign_to_classe(self, apprenant_id: int, classe_id: int) -> ApprenantDTO:
        await self.relations.assign_apprenant_to_classe(apprenant_id, classe_id)
        return await self._dto(apprenant_id)

    async def remove_from_classe(self, apprenant_id: int, classe_id: int) -> ApprenantDTO:
        await self.relations.remove_apprenant_from_classe(apprenant_id, classe_id)
        return await self._dto(apprenant_id)

    async def assign_to_formation(self, apprenant_id: int, formation_id: int) -> ApprenantDTO:
        await self.relations.assign_apprenant_to_formation(apprenant_id, formation_id)
        return await self._dto(apprenant_id)

    async def remove_from_formation(self, apprenant_id: int, formation_id: int) -> bool:
        return await self.relations.remove_apprenant_from_formation(apprenant_id, formation_id)
