from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, utcnow

"""
Model Inscription.

Rôle (fonctionnel) :
- Ligne d’association Formation <-> Apprenant (inscription d’un apprenant à une formation).
- Clé primaire composite (formation_id, apprenant_id) : un apprenant n’est inscrit
  qu’une fois à une même formation, y compris en cas d’écritures concurrentes.

Pas de relation ORM vers les entités : la ligne ne porte que les identifiants
(les collections sont déclarées côté Apprenant et Formation).
"""


class Inscription(Base):
    __tablename__ = "inscriptions"

    formation_id: Mapped[int] = mapped_column(
        ForeignKey("formations.id", ondelete="CASCADE"),
        primary_key=True,
    )
    apprenant_id: Mapped[int] = mapped_column(
        ForeignKey("apprenants.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"Inscription(formation_id={self.formation_id!r}, apprenant_id={self.apprenant_id!r})"
