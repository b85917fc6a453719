from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.ext.associationproxy import AssociationProxy, association_proxy
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin
from app.models.enums import FormationStatus, NiveauFormation
from app.models.inscription import Inscription

"""
Model Formation.

Rôle (fonctionnel) :
- Représente une session de formation planifiée (titre, niveau, prérequis, capacités, dates).
- Porte le statut du cycle de vie (PLANIFIEE -> EN_COURS -> TERMINEE, ANNULEE).
- Porte la référence vers son formateur (au plus un) et ses inscriptions (apprenants).

Contraintes :
- 0 < capacite_min <= capacite_max (CHECK en base, en plus de la validation applicative).
- Nombre d’inscriptions <= capacite_max (contrôlé par app.validation.relationships,
  protégé contre les écritures concurrentes par le verrouillage optimiste sur la ligne).
"""


class Formation(TimestampMixin, Base):
    __tablename__ = "formations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    titre: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    niveau: Mapped[NiveauFormation] = mapped_column(
        SAEnum(NiveauFormation, native_enum=False, length=20),
        nullable=False,
    )
    prerequis: Mapped[str | None] = mapped_column(Text, nullable=True)

    capacite_min: Mapped[int] = mapped_column(Integer, nullable=False)
    capacite_max: Mapped[int] = mapped_column(Integer, nullable=False)

    date_debut: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    date_fin: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    statut: Mapped[FormationStatus] = mapped_column(
        SAEnum(FormationStatus, native_enum=False, length=20),
        nullable=False,
        default=FormationStatus.PLANIFIEE,
    )

    formateur_id: Mapped[int | None] = mapped_column(
        ForeignKey("formateurs.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    inscriptions: Mapped[list[Inscription]] = relationship(
        Inscription,
        foreign_keys=[Inscription.formation_id],
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    apprenant_ids: AssociationProxy[list[int]] = association_proxy(
        "inscriptions",
        "apprenant_id",
        creator=lambda apprenant_id: Inscription(apprenant_id=apprenant_id),
    )

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        CheckConstraint("capacite_min > 0 AND capacite_min <= capacite_max", name="ck_formations_capacites"),
        Index("ix_formations_statut_date", "statut", "date_debut"),
    )

    @property
    def nb_inscrits(self) -> int:
        return len(self.inscriptions)

    def __repr__(self) -> str:
        return f"Formation(id={self.id!r}, titre={self.titre!r}, statut={self.statut!r})"
