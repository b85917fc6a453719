from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin
from app.models.apprenant import Apprenant
from app.models.formateur import Formateur

"""
Model Classe.

Rôle (fonctionnel) :
- Représente une classe (nom + numéro de salle unique).
- Ne possède aucune référence : apprenants et formateurs pointent vers la classe
  via leur propre classe_id. Les listes exposées ici sont des projections en lecture seule.
- Aucune capacité plafond n’est portée par la classe.
"""


class Classe(TimestampMixin, Base):
    __tablename__ = "classes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    nom: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    # Identifiant de salle unique (contrainte DB)
    num_salle: Mapped[str] = mapped_column(String(10), nullable=False, unique=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    apprenants: Mapped[list[Apprenant]] = relationship(
        Apprenant,
        primaryjoin="Apprenant.classe_id == Classe.id",
        foreign_keys=[Apprenant.classe_id],
        viewonly=True,
        lazy="selectin",
    )
    formateurs: Mapped[list[Formateur]] = relationship(
        Formateur,
        primaryjoin="Formateur.classe_id == Classe.id",
        foreign_keys=[Formateur.classe_id],
        viewonly=True,
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def apprenant_ids(self) -> list[int]:
        return sorted(a.id for a in self.apprenants)

    @property
    def formateur_ids(self) -> list[int]:
        return sorted(f.id for f in self.formateurs)

    def __repr__(self) -> str:
        return f"Classe(id={self.id!r}, num_salle={self.num_salle!r})"
