from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.formation import Formation

"""
Model Formateur.

Rôle (fonctionnel) :
- Représente un formateur (nom, prénom, email unique, spécialité).
- Porte la référence vers sa classe (classe_id, au plus une classe).

Relations :
- Formateur -> Classe : FK classe_id (SET NULL si la classe disparaît).
- Formateur <- Formation : les formations animées sont une projection en lecture seule
  (la FK est portée par formations.formateur_id).
"""


class Formateur(TimestampMixin, Base):
    __tablename__ = "formateurs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    nom: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    prenom: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    specialite: Mapped[str] = mapped_column(String(150), nullable=False, index=True)

    classe_id: Mapped[int | None] = mapped_column(
        ForeignKey("classes.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # Projection (lecture seule) : formations dont formateur_id == id
    formations: Mapped[list["Formation"]] = relationship(
        "Formation",
        primaryjoin="Formation.formateur_id == Formateur.id",
        foreign_keys="Formation.formateur_id",
        viewonly=True,
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def formation_ids(self) -> list[int]:
        return sorted(f.id for f in self.formations)

    def __repr__(self) -> str:
        return f"Formateur(id={self.id!r}, email={self.email!r})"
