from __future__ import annotations

from typing import Any, Dict

from app.core.errors import ConflictError
from app.db.store import EntityStore
from app.models import Apprenant, Formateur, NiveauFormation
from app.schemas.apprenants import ApprenantWrite
from app.schemas.classes import ClasseWrite
from app.schemas.formateurs import FormateurWrite
from app.schemas.formations import FormationCreate, FormationWrite
from app.validation.fields import (
    require_text,
    validate_capacities,
    validate_dates,
    validate_email,
    validate_enum,
    validate_num_salle,
)
from app.validation.lifecycle import INITIAL_STATE
from app.validation.uniqueness import validate_unique_email, validate_unique_num_salle

"""
Validateurs par entité.

Chaque validateur expose validate_for_create(payload) et validate_for_update(id, payload) :
- contrôles de champs (court-circuit : première erreur rencontrée),
- puis contrôles d’unicité contre l’Entity Store (en excluant l’id en cours de mise à jour).

Les deux méthodes retournent les valeurs nettoyées (strip, email en minuscules, enums)
prêtes à être appliquées sur l’entité.
"""

Values = Dict[str, Any]


class ApprenantValidator:
    def __init__(self, store: EntityStore) -> None:
        self.store = store

    def validate_fields(self, payload: ApprenantWrite) -> Values:
        return {
            "nom": require_text(payload.nom, "nom", max_length=100),
            "prenom": require_text(payload.prenom, "prenom", max_length=100),
            "email": validate_email(payload.email),
            "niveau": validate_enum(payload.niveau, NiveauFormation, "niveau"),
        }

    async def validate_for_create(self, payload: ApprenantWrite) -> Values:
        values = self.validate_fields(payload)
        await validate_unique_email(self.store, Apprenant, values["email"])
        return values

    async def validate_for_update(self, apprenant_id: int, payload: ApprenantWrite) -> Values:
        values = self.validate_fields(payload)
        await validate_unique_email(self.store, Apprenant, values["email"], exclude_id=apprenant_id)
        return values


class FormateurValidator:
    def __init__(self, store: EntityStore) -> None:
        self.store = store

    def validate_fields(self, payload: FormateurWrite) -> Values:
        return {
            "nom": require_text(payload.nom, "nom", max_length=100),
            "prenom": require_text(payload.prenom, "prenom", max_length=100),
            "email": validate_email(payload.email),
            "specialite": require_text(payload.specialite, "specialite", max_length=150),
        }

    async def validate_for_create(self, payload: FormateurWrite) -> Values:
        values = self.validate_fields(payload)
        await validate_unique_email(self.store, Formateur, values["email"])
        return values

    async def validate_for_update(self, formateur_id: int, payload: FormateurWrite) -> Values:
        values = self.validate_fields(payload)
        await validate_unique_email(self.store, Formateur, values["email"], exclude_id=formateur_id)
        return values


class ClasseValidator:
    def __init__(self, store: EntityStore) -> None:
        self.store = store

    def validate_fields(self, payload: ClasseWrite) -> Values:
        return {
            "nom": require_text(payload.nom, "nom", min_length=2, max_length=50),
            "num_salle": validate_num_salle(payload.num_salle),
        }

    async def validate_for_create(self, payload: ClasseWrite) -> Values:
        values = self.validate_fields(payload)
        await validate_unique_num_salle(self.store, values["num_salle"])
        return values

    async def validate_for_update(self, classe_id: int, payload: ClasseWrite) -> Values:
        values = self.validate_fields(payload)
        await validate_unique_num_salle(self.store, values["num_salle"], exclude_id=classe_id)
        return values


class FormationValidator:
    """
    Champs communs : titre (>= 3 caractères), niveau, capacités, dates.

    Création uniquement : date de début non passée, statut initial PLANIFIEE.
    Le formateur éventuel (formateur_id) est résolu par le service (NotFound).
    """

    def __init__(self, store: EntityStore) -> None:
        self.store = store

    def validate_fields(self, payload: FormationWrite, *, creation: bool) -> Values:
        values: Values = {
            "titre": require_text(payload.titre, "titre", min_length=3, max_length=100),
            "niveau": validate_enum(payload.niveau, NiveauFormation, "niveau"),
            "prerequis": payload.prerequis.strip() if payload.prerequis and payload.prerequis.strip() else None,
        }

        validate_capacities(payload.capacite_min, payload.capacite_max)
        values["capacite_min"] = payload.capacite_min
        values["capacite_max"] = payload.capacite_max

        validate_dates(payload.date_debut, payload.date_fin, forbid_past=creation)
        values["date_debut"] = payload.date_debut
        values["date_fin"] = payload.date_fin
        return values

    async def validate_for_create(self, payload: FormationCreate) -> Values:
        values = self.validate_fields(payload, creation=True)

        statut = payload.statut or INITIAL_STATE
        if statut != INITIAL_STATE:
            raise ConflictError(
                "Une nouvelle formation doit avoir le statut PLANIFIEE",
                statut=statut.value,
            )
        values["statut"] = statut
        return values

    async def validate_for_update(self, formation_id: int, payload: FormationWrite) -> Values:
        return self.validate_fields(payload, creation=False)
