from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import NiveauFormation

"""
Schemas Apprenants (Pydantic).

Rôle (fonctionnel) :
- ApprenantCreate / ApprenantUpdate : payloads d’écriture. Les champs texte sont optionnels
  au niveau du schéma : l’absence est signalée par la couche validation (MISSING_FIELD).
  Un niveau inconnu est rejeté dès la désérialisation (422).
- ApprenantDTO : représentation exposée (références par identifiants).

Notes :
- La classe et les formations ne se modifient pas via ces payloads mais via les routes
  d’affectation dédiées.
"""


class ApprenantWrite(BaseModel):
    model_config = ConfigDict(extra="forbid")

    nom: Optional[str] = Field(default=None, max_length=100)
    prenom: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    niveau: Optional[NiveauFormation] = None


class ApprenantCreate(ApprenantWrite):
    pass


class ApprenantUpdate(ApprenantWrite):
    pass


class ApprenantDTO(BaseModel):
    id: Optional[int] = None
    nom: str
    prenom: str
    email: str
    niveau: NiveauFormation
    classe_id: Optional[int] = None
    formation_ids: List[int] = Field(default_factory=list)
