from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import unit_of_work
from app.db.store import EntityStore, contains_ci
from app.models import Formateur, Formation, FormationStatus, Inscription, NiveauFormation
from app.schemas.common import PageResponse, build_page
from app.schemas.formations import FormationCreate, FormationDTO, FormationFullOut, FormationUpdate
from app.services.mappers import formation_to_dto
from app.services.relations import RelationService
from app.validation import relationships
from app.validation.entities import FormationValidator
from app.validation.fields import as_utc

"""
Formation Service.

Rôle (fonctionnel) :
- CRUD des formations :
  - création au statut PLANIFIEE, formateur optionnel (doit exister) ;
  - mise à jour des champs descriptifs uniquement (statut et relations ont leurs routes),
    sans descendre capacite_max sous le nombre d’inscrits.
- Cycle de vie : update_status via la machine à états (app.validation.lifecycle).
- Consultation : liste / recherche paginées, par statut, par période, par formateur,
  formations avec places, planifiées par niveau, à venir, formation complète ou non.
- Relations : inscriptions d’apprenants, formateur (délégué à RelationService).
"""

log = logging.getLogger("app.formations")


def _inscrits_count():
    return (
        select(func.count(Inscription.apprenant_id))
        .where(Inscription.formation_id == Formation.id)
        .correlate(Formation)
        .scalar_subquery()
    )


class FormationService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.store = EntityStore(db)
        self.validator = FormationValidator(self.store)
        self.relations = RelationService(db)

    async def _dto(self, formation_id: int) -> FormationDTO:
        return formation_to_dto(await self.store.get(Formation, formation_id))

    async def _dtos(self, stmt) -> List[FormationDTO]:
        return [formation_to_dto(f) for f in await self.store.find_all(stmt)]

    async def _page(self, stmt, *, page: int, page_size: int) -> PageResponse[FormationDTO]:
        items, total = await self.store.paginate(stmt, page=page, page_size=page_size)
        return build_page([formation_to_dto(f) for f in items], page=page, page_size=page_size, total=total)

    # --- CRUD ---

    async def create(self, payload: FormationCreate) -> FormationDTO:
        async with unit_of_work(self.db):
            values = await self.validator.validate_for_create(payload)
            if payload.formateur_id is not None:
                await self.store.get(Formateur, payload.formateur_id)
                values["formateur_id"] = payload.formateur_id

            formation = await self.store.save(Formation(**values))

        log.info(
            "formation_created",
            extra={"entity": "Formation", "entity_id": formation.id, "formateur_id": payload.formateur_id},
        )
        return await self._dto(formation.id)

    async def update(self, formation_id: int, payload: FormationUpdate) -> FormationDTO:
        async with unit_of_work(self.db):
            formation = await self.store.get(Formation, formation_id)
            values = await self.validator.validate_for_update(formation_id, payload)
            relationships.ensure_capacity_covers_enrolled(formation, values["capacite_max"])

            for key, value in values.items():
                setattr(formation, key, value)
            await self.store.save(formation)

        log.info("formation_updated", extra={"entity": "Formation", "entity_id": formation_id})
        return await self._dto(formation_id)

    async def delete(self, formation_id: int) -> None:
        # Inscriptions supprimées en cascade ; formateur_id est porté par la formation elle-même
        async with unit_of_work(self.db):
            formation = await self.store.get(Formation, formation_id)
            await self.store.delete(formation)

        log.info("formation_deleted", extra={"entity": "Formation", "entity_id": formation_id})

    async def get(self, formation_id: int) -> FormationDTO:
        return await self._dto(formation_id)

    async def list(self, *, page: int, page_size: int) -> PageResponse[FormationDTO]:
        return await self._page(select(Formation).order_by(Formation.id), page=page, page_size=page_size)

    # --- Cycle de vie ---

    async def update_status(self, formation_id: int, statut: FormationStatus) -> FormationDTO:
        await self.relations.transition_formation(formation_id, statut)
        return await self._dto(formation_id)

    async def is_full(self, formation_id: int) -> FormationFullOut:
        formation = await self.store.get(Formation, formation_id)
        return FormationFullOut(
            formation_id=formation.id,
            full=formation.nb_inscrits >= formation.capacite_max,
            nb_inscrits=formation.nb_inscrits,
            capacite_max=formation.capacite_max,
        )

    # --- Recherche ---

    async def search(self, titre: str, *, page: int, page_size: int) -> PageResponse[FormationDTO]:
        stmt = select(Formation).where(contains_ci(Formation.titre, titre)).order_by(Formation.id)
        return await self._page(stmt, page=page, page_size=page_size)

    async def find_by_statut(self, statut: FormationStatus) -> List[FormationDTO]:
        return await self._dtos(select(Formation).where(Formation.statut == statut).order_by(Formation.id))

    async def find_between_dates(self, debut: datetime, fin: datetime) -> List[FormationDTO]:
        """Formations dont la date de début est dans [debut, fin]."""
        stmt = (
            select(Formation)
            .where(Formation.date_debut >= as_utc(debut), Formation.date_debut <= as_utc(fin))
            .order_by(Formation.date_debut, Formation.id)
        )
        return await self._dtos(stmt)

    async def find_by_formateur(self, formateur_id: int) -> List[FormationDTO]:
        await self.store.get(Formateur, formateur_id)
        return await self._dtos(
            select(Formation).where(Formation.formateur_id == formateur_id).order_by(Formation.id)
        )

    async def find_with_available_places(self) -> List[FormationDTO]:
        """Formations ouvertes aux inscriptions (PLANIFIEE) et non complètes."""
        stmt = (
            select(Formation)
            .where(Formation.statut == FormationStatus.PLANIFIEE)
            .where(_inscrits_count() < Formation.capacite_max)
            .order_by(Formation.id)
        )
        return await self._dtos(stmt)

    async def find_planned_by_niveau(self, niveau: NiveauFormation) -> List[FormationDTO]:
        stmt = (
            select(Formation)
            .where(Formation.statut == FormationStatus.PLANIFIEE, Formation.niveau == niveau)
            .order_by(Formation.date_debut, Formation.id)
        )
        return await self._dtos(stmt)

    async def find_upcoming(self, statut: FormationStatus, *, page: int, page_size: int) -> PageResponse[FormationDTO]:
        stmt = (
            select(Formation)
            .where(Formation.statut == statut, Formation.date_debut > datetime.now(timezone.utc))
            .order_by(Formation.date_debut, Formation.id)
        )
        return await self._page(stmt, page=page, page_size=page_size)

    # --- Relations ---

    async def add_apprenant(self, formation_id: int, apprenant_id: int) -> FormationDTO:
        await self.relations.assign_apprenant_to_formation(apprenant_id, formation_id)
        return await self._dto(formation_id)

    async def remove_apprenant(self, formation_id: int, apprenant_id: int) -> bool:
        return await self.relations.remove_apprenant_from_formation(apprenant_id, formation_id)

    async def assign_formateur(self, formation_id: int, formateur_id: int) -> FormationDTO:
        await self.relations.assign_formateur_to_formation(formateur_id, formation_id)
        return await self._dto(formation_id)

    async def remove_formateur(self, formation_id: int, formateur_id: int) -> FormationDTO:
        await self.relations.remove_formateur_from_formation(formateur_id, formation_id)
        return await self._dto(formation_id)
