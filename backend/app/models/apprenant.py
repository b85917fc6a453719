from __future__ import annotations

from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.ext.associationproxy import AssociationProxy, association_proxy
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin
from app.models.enums import NiveauFormation
from app.models.inscription import Inscription

"""
Model Apprenant.

Rôle (fonctionnel) :
- Représente un apprenant (nom, prénom, email unique, niveau).
- Porte la référence vers sa classe (classe_id, au plus une classe).
- Porte ses inscriptions aux formations (lignes Inscription).

Relations :
- Apprenant -> Classe : FK classe_id (SET NULL si la classe disparaît).
- Apprenant -> Inscription : 0..N, supprimées avec l’apprenant.
- formation_ids : projection des identifiants de formations (association proxy).
"""


class Apprenant(TimestampMixin, Base):
    __tablename__ = "apprenants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    nom: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    prenom: Mapped[str] = mapped_column(String(100), nullable=False)

    # Unicité garantie en base (arbitre final en cas de concurrence)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    niveau: Mapped[NiveauFormation] = mapped_column(
        SAEnum(NiveauFormation, native_enum=False, length=20),
        nullable=False,
        index=True,
    )

    classe_id: Mapped[int | None] = mapped_column(
        ForeignKey("classes.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Verrouillage optimiste
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    inscriptions: Mapped[list[Inscription]] = relationship(
        Inscription,
        foreign_keys=[Inscription.apprenant_id],
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    formation_ids: AssociationProxy[list[int]] = association_proxy(
        "inscriptions",
        "formation_id",
        creator=lambda formation_id: Inscription(formation_id=formation_id),
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"Apprenant(id={self.id!r}, email={self.email!r})"
