from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

"""
DB Base.

Rôle (fonctionnel) :
- Définit la classe Base SQLAlchemy commune à tous les modèles ORM.
- Fournit les horodatages created_at / updated_at (UTC) partagés par les entités métier.

Note :
- Chaque modèle déclare sa propre colonne `version` (version_id_col) : une mise à jour
  concurrente sur une ligne déjà modifiée lève StaleDataError au flush.
"""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Classe racine ORM (SQLAlchemy Declarative)."""
    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def touch(self) -> None:
        """Force un UPDATE de la ligne (et donc un contrôle de version) au prochain flush."""
        self.updated_at = utcnow()
