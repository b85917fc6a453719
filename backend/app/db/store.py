from __future__ import annotations

from typing import Any, Sequence, Tuple, Type, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.db.base import Base
from app.models import Apprenant, Classe, Formateur

"""
Entity Store.

Rôle (fonctionnel) :
- Point d’accès unique à la persistance pour les services et validateurs :
  find_by_id / get / exists_by_id / save / delete / exists_by_email / exists_by_num_salle.
- Fournit l’exécution paginée d’une requête (items + total).

Notes :
- Les lectures utilisent populate_existing : l’objet de l’identity map est rechargé
  (collections comprises), les projections d’identifiants sont donc toujours à jour.
- save() fait un flush (id attribué par la base) mais ne commit pas : le commit
  appartient à l’unité de travail du service appelant.
"""

ModelT = TypeVar("ModelT", bound=Base)

EMAIL_OWNERS = (Apprenant, Formateur)


class EntityStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_by_id(self, model: Type[ModelT], entity_id: int) -> ModelT | None:
        return await self.db.get(model, entity_id, populate_existing=True)

    async def get(self, model: Type[ModelT], entity_id: int) -> ModelT:
        """Comme find_by_id, mais lève NotFoundError (avec le nom de l’entité et l’id)."""
        entity = await self.find_by_id(model, entity_id)
        if entity is None:
            raise NotFoundError(model.__name__, entity_id)
        return entity

    async def exists_by_id(self, model: Type[ModelT], entity_id: int) -> bool:
        stmt = select(func.count()).select_from(model).where(model.id == entity_id)
        return (await self.db.execute(stmt)).scalar_one() > 0

    async def save(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        await self.db.flush()
        return entity

    async def delete(self, entity: Base) -> None:
        await self.db.delete(entity)
        await self.db.flush()

    async def exists_by_email(self, model: Type[ModelT], email: str, exclude_id: int | None = None) -> bool:
        """Unicité de l’email par type d’entité (Apprenant et Formateur sont indépendants)."""
        if model not in EMAIL_OWNERS:
            raise TypeError(f"{model.__name__} ne porte pas d'email")
        stmt = select(func.count()).select_from(model).where(func.lower(model.email) == email.strip().lower())
        if exclude_id is not None:
            stmt = stmt.where(model.id != exclude_id)
        return (await self.db.execute(stmt)).scalar_one() > 0

    async def exists_by_num_salle(self, num_salle: str, exclude_id: int | None = None) -> bool:
        stmt = select(func.count()).select_from(Classe).where(Classe.num_salle == num_salle.strip())
        if exclude_id is not None:
            stmt = stmt.where(Classe.id != exclude_id)
        return (await self.db.execute(stmt)).scalar_one() > 0

    async def find_one(self, stmt: Select[Any]) -> Any | None:
        result = await self.db.execute(stmt.execution_options(populate_existing=True))
        return result.scalars().first()

    async def find_all(self, stmt: Select[Any]) -> Sequence[Any]:
        result = await self.db.execute(stmt.execution_options(populate_existing=True))
        return result.scalars().all()

    async def paginate(self, stmt: Select[Any], *, page: int, page_size: int) -> Tuple[Sequence[Any], int]:
        """Exécute `stmt` paginé. Le total est calculé sur la même requête (mêmes filtres)."""
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = (await self.db.execute(count_stmt)).scalar_one()

        items = await self.find_all(stmt.offset((page - 1) * page_size).limit(page_size))
        return items, total


def contains_ci(column: Any, term: str) -> Any:
    """Filtre « contient » insensible à la casse (les jokers % et _ du terme sont échappés)."""
    return func.lower(column).contains(term.strip().lower(), autoescape=True)
