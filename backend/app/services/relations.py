from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import unit_of_work
from app.db.store import EntityStore
from app.models import Apprenant, Classe, Formateur, Formation, FormationStatus, Inscription
from app.validation import lifecycle, relationships

"""
Relation Service.

Rôle (fonctionnel) :
- Implémente les opérations qui lient / délient deux entités et la transition de statut
  d’une formation :
  - apprenant <-> classe, formateur <-> classe (au plus une classe par membre),
  - apprenant <-> formation (PLANIFIEE + capacité),
  - formateur <-> formation (au plus un formateur, PLANIFIEE),
  - statut de formation (machine à états).
- Chaque opération = une unité de travail : lecture, contrôles, écriture, un seul commit.
  En cas d’erreur, rollback complet (aucune relation à moitié appliquée).

Les services par entité (apprenants, formateurs, classes, formations) délèguent ici
pour que les deux points d’entrée HTTP d’une même relation appliquent les mêmes règles.
"""

log = logging.getLogger("app.relations")


class RelationService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.store = EntityStore(db)

    # --- Classe ---

    async def assign_apprenant_to_classe(self, apprenant_id: int, classe_id: int) -> Apprenant:
        async with unit_of_work(self.db):
            apprenant = await self.store.get(Apprenant, apprenant_id)
            classe = await self.store.get(Classe, classe_id)

            relationships.ensure_can_join_classe(apprenant, classe.id)
            apprenant.classe_id = classe.id
            await self.store.save(apprenant)

        log.info("apprenant_assigned_to_classe", extra={"apprenant_id": apprenant_id, "classe_id": classe_id})
        return apprenant

    async def remove_apprenant_from_classe(self, apprenant_id: int, classe_id: int) -> Apprenant:
        async with unit_of_work(self.db):
            apprenant = await self.store.get(Apprenant, apprenant_id)
            classe = await self.store.get(Classe, classe_id)

            relationships.ensure_in_classe(apprenant, classe.id)
            apprenant.classe_id = None
            await self.store.save(apprenant)

        log.info("apprenant_removed_from_classe", extra={"apprenant_id": apprenant_id, "classe_id": classe_id})
        return apprenant

    async def assign_formateur_to_classe(self, formateur_id: int, classe_id: int) -> Formateur:
        async with unit_of_work(self.db):
            formateur = await self.store.get(Formateur, formateur_id)
            classe = await self.store.get(Classe, classe_id)

            relationships.ensure_can_join_classe(formateur, classe.id)
            formateur.classe_id = classe.id
            await self.store.save(formateur)

        log.info("formateur_assigned_to_classe", extra={"formateur_id": formateur_id, "classe_id": classe_id})
        return formateur

    async def remove_formateur_from_classe(self, formateur_id: int, classe_id: int) -> Formateur:
        async with unit_of_work(self.db):
            formateur = await self.store.get(Formateur, formateur_id)
            classe = await self.store.get(Classe, classe_id)

            relationships.ensure_in_classe(formateur, classe.id)
            formateur.classe_id = None
            await self.store.save(formateur)

        log.info("formateur_removed_from_classe", extra={"formateur_id": formateur_id, "classe_id": classe_id})
        return formateur

    # --- Formation ---

    async def assign_apprenant_to_formation(self, apprenant_id: int, formation_id: int) -> Formation:
        """Inscription. Ré-inscrire un apprenant déjà inscrit ne change rien (pas d’erreur)."""
        async with unit_of_work(self.db):
            apprenant = await self.store.get(Apprenant, apprenant_id)
            formation = await self.store.get(Formation, formation_id)

            if relationships.ensure_can_enroll(formation, apprenant):
                inscription = Inscription()
                formation.inscriptions.append(inscription)
                apprenant.inscriptions.append(inscription)

                # UPDATE de la ligne formation : deux inscriptions concurrentes
                # ne peuvent pas dépasser capacite_max (contrôle de version)
                formation.touch()
                await self.store.save(formation)

        log.info("apprenant_enrolled", extra={"apprenant_id": apprenant_id, "formation_id": formation_id})
        return formation

    async def remove_apprenant_from_formation(self, apprenant_id: int, formation_id: int) -> bool:
        """Retourne True si l’apprenant était inscrit (et a été retiré), False sinon."""
        async with unit_of_work(self.db):
            apprenant = await self.store.get(Apprenant, apprenant_id)
            formation = await self.store.get(Formation, formation_id)

            relationships.ensure_can_unenroll(formation, apprenant)

            inscription = next((i for i in formation.inscriptions if i.apprenant_id == apprenant.id), None)
            if inscription is None:
                return False

            formation.inscriptions.remove(inscription)
            if inscription in apprenant.inscriptions:
                apprenant.inscriptions.remove(inscription)
            formation.touch()
            await self.store.save(formation)

        log.info("apprenant_unenrolled", extra={"apprenant_id": apprenant_id, "formation_id": formation_id})
        return True

    async def assign_formateur_to_formation(self, formateur_id: int, formation_id: int) -> Formation:
        async with unit_of_work(self.db):
            formateur = await self.store.get(Formateur, formateur_id)
            formation = await self.store.get(Formation, formation_id)

            relationships.ensure_can_assign_formateur(formation, formateur)
            formation.formateur_id = formateur.id
            await self.store.save(formation)

        log.info("formateur_assigned_to_formation", extra={"formateur_id": formateur_id, "formation_id": formation_id})
        return formation

    async def remove_formateur_from_formation(self, formateur_id: int, formation_id: int) -> Formation:
        async with unit_of_work(self.db):
            formateur = await self.store.get(Formateur, formateur_id)
            formation = await self.store.get(Formation, formation_id)

            relationships.ensure_can_remove_formateur(formation, formateur)
            formation.formateur_id = None
            await self.store.save(formation)

        log.info("formateur_removed_from_formation", extra={"formateur_id": formateur_id, "formation_id": formation_id})
        return formation

    async def transition_formation(self, formation_id: int, requested: FormationStatus) -> Formation:
        async with unit_of_work(self.db):
            formation = await self.store.get(Formation, formation_id)
            old_status = formation.statut

            lifecycle.ensure_transition(old_status, requested, formation_id=formation.id)
            formation.statut = requested
            await self.store.save(formation)

        log.info(
            "formation_status_change",
            extra={
                "formation_id": formation_id,
                "old_status": old_status.value,
                "new_status": requested.value,
            },
        )
        return formation
