from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.enums import FormationStatus, NiveauFormation
from app.schemas.common import ensure_utc

"""
Schemas Formations (Pydantic).

Rôle (fonctionnel) :
- FormationCreate : création (statut absent => PLANIFIEE ; formateur optionnel).
- FormationUpdate : mise à jour des champs descriptifs (titre, niveau, prérequis, capacités, dates).
  Le statut passe par /status/{statut}, les relations par les routes d’affectation.
- FormationDTO : représentation exposée (formateur_id + apprenant_ids).
- FormationFullOut : réponse de /{id}/full.

Notes :
- Les dates sans fuseau sont interprétées en UTC.
- niveau / statut inconnus : rejet à la désérialisation (422).
"""


class FormationWrite(BaseModel):
    model_config = ConfigDict(extra="forbid")

    titre: Optional[str] = Field(default=None, max_length=100)
    niveau: Optional[NiveauFormation] = None
    prerequis: Optional[str] = Field(default=None, max_length=2000)
    capacite_min: Optional[int] = None
    capacite_max: Optional[int] = None
    date_debut: Optional[datetime] = None
    date_fin: Optional[datetime] = None

    @field_validator("date_debut", "date_fin")
    @classmethod
    def _dates_utc(cls, v: Any) -> Any:
        return ensure_utc(v)


class FormationCreate(FormationWrite):
    statut: Optional[FormationStatus] = None
    formateur_id: Optional[int] = None


class FormationUpdate(FormationWrite):
    pass


class FormationDTO(BaseModel):
    id: Optional[int] = None
    titre: str
    niveau: NiveauFormation
    prerequis: Optional[str] = None
    capacite_min: int
    capacite_max: int
    date_debut: datetime
    date_fin: datetime
    statut: FormationStatus = FormationStatus.PLANIFIEE
    formateur_id: Optional[int] = None
    apprenant_ids: List[int] = Field(default_factory=list)


class FormationFullOut(BaseModel):
    formation_id: int
    full: bool
    nb_inscrits: int
    capacite_max: int
