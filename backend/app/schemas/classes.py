from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

"""
Schemas Classes (Pydantic).

- ClasseCreate / ClasseUpdate : nom + numéro de salle. Une classe n’est jamais créée
  avec des membres (extra="forbid" refuse apprenant_ids / formateur_ids en entrée).
- ClasseDTO : représentation exposée ; apprenant_ids / formateur_ids sont des projections en lecture.
"""


class ClasseWrite(BaseModel):
    model_config = ConfigDict(extra="forbid")

    nom: Optional[str] = Field(default=None, max_length=50)
    num_salle: Optional[str] = Field(default=None, max_length=10)


class ClasseCreate(ClasseWrite):
    pass


class ClasseUpdate(ClasseWrite):
    pass


class ClasseDTO(BaseModel):
    id: Optional[int] = None
    nom: str
    num_salle: str
    apprenant_ids: List[int] = Field(default_factory=list)
    formateur_ids: List[int] = Field(default_factory=list)
