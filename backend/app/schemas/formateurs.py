from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

"""
Schemas Formateurs (Pydantic).

- FormateurCreate / FormateurUpdate : payloads d’écriture (présence contrôlée par la validation métier).
- FormateurDTO : représentation exposée ; formation_ids est une projection en lecture.
"""


class FormateurWrite(BaseModel):
    model_config = ConfigDict(extra="forbid")

    nom: Optional[str] = Field(default=None, max_length=100)
    prenom: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    specialite: Optional[str] = Field(default=None, max_length=150)


class FormateurCreate(FormateurWrite):
    pass


class FormateurUpdate(FormateurWrite):
    pass


class FormateurDTO(BaseModel):
    id: Optional[int] = None
    nom: str
    prenom: str
    email: str
    specialite: str
    classe_id: Optional[int] = None
    formation_ids: List[int] = Field(default_factory=list)
